"""Finalization of edit sessions once the external program exits."""

from __future__ import annotations

import asyncio
import logging

from .poller import SessionFunc, SyncedFunc, check_for_changes
from .session import EditSession, Reporter, SessionState

logger = logging.getLogger(__name__)


class Reaper:
    """Wait for the external program and tear the session down exactly once."""

    def __init__(
        self,
        report: Reporter,
        *,
        on_synced: SyncedFunc | None = None,
        on_closed: SessionFunc | None = None,
    ) -> None:
        self._report = report
        self._on_synced = on_synced
        self._on_closed = on_closed

    def watch(self, session: EditSession) -> None:
        """Register the process-exit watch; call right after a successful spawn."""

        loop = asyncio.get_running_loop()
        session.reap_task = loop.create_task(
            self._wait(session), name=f"editbridge-reap-{session.pid}"
        )

    async def _wait(self, session: EditSession) -> None:
        process = session.process
        if process is None:  # pragma: no cover - watch() requires a process
            self.finalize(session, sync=False)
            return

        try:
            returncode = await process.wait()
        except asyncio.CancelledError:
            # Host loop is shutting down: no sync, but never leak the file.
            self.finalize(session, sync=False)
            session.release_process(process.returncode)
            raise

        if returncode != 0:
            # The last write is still synced; a failing editor may have saved.
            logger.warning(
                "External editor (pid %s) exited with status %s",
                session.pid,
                returncode,
            )
        else:
            logger.debug("External editor (pid %s) exited", session.pid)

        self.finalize(session, sync=True)
        session.release_process(returncode)

    def finalize(self, session: EditSession, *, sync: bool = True) -> bool:
        """Tear down ``session``; later calls are no-ops and return False.

        When ``sync`` is true and the target is still alive, one last change
        check runs first so an edit written just before exit is not lost.
        """

        if session.finalized:
            return False
        session.state = SessionState.FINALIZING

        if session.poll_handle is not None:
            session.poll_handle.cancel()
            session.poll_handle = None

        if sync and session.target_alive():
            check_for_changes(session, self._report, self._on_synced)

        try:
            session.path.unlink(missing_ok=True)
        except OSError as exc:
            self._report(session.target, f"Cannot remove {session.path}: {exc}")

        session.state = SessionState.DESTROYED
        logger.debug("Session for %s finalized", session.path)
        if self._on_closed is not None:
            self._on_closed(session)
        session.notify_if_closed()
        return True
