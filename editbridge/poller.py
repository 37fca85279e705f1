"""Interval-driven detection of edits made by the external program."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

from .session import EditSession, Reporter, SessionState

logger = logging.getLogger(__name__)

SyncedFunc = Callable[[EditSession, str], None]
SessionFunc = Callable[[EditSession], None]


def read_contents(path: Path, encoding: str = "utf-8") -> str:
    """Return the complete content of ``path`` with line endings untouched."""

    with path.open("r", encoding=encoding, newline="") as fh:
        return fh.read()


def check_for_changes(
    session: EditSession,
    report: Reporter,
    on_synced: SyncedFunc | None = None,
) -> bool:
    """Deliver the file content to the consumer if it changed since last seen.

    A missing file is not an error: editors commonly replace the file on save
    and it may reappear on the next check. Returns True when the consumer
    received new content.
    """

    try:
        mtime_ns = session.path.stat().st_mtime_ns
    except FileNotFoundError:
        return False
    except OSError as exc:
        report(session.target, f"Cannot stat {session.path}: {exc}")
        return False

    if not session.advance_mtime(mtime_ns):
        return False

    logger.debug("File %s has been modified", session.path)
    try:
        contents = read_contents(session.path, session.encoding)
    except FileNotFoundError:
        return False
    except (OSError, UnicodeDecodeError) as exc:
        report(session.target, f"Cannot read {session.path}: {exc}")
        return False

    try:
        session.consumer(contents)
    except Exception as exc:
        report(session.target, f"Failed to apply edited content: {exc}")
        return False

    session.changes += 1
    logger.debug("Contents of %s updated (%d chars)", session.path, len(contents))
    if on_synced is not None:
        on_synced(session, contents)
    return True


class ChangePoller:
    """Re-check a session's temp file on a fixed interval.

    Runs on the host's asyncio loop. There is no timeout: polling stops only
    once the session leaves the ``POLLING`` state or its target disappears.
    """

    def __init__(
        self,
        interval: float,
        report: Reporter,
        *,
        on_target_gone: SessionFunc,
        on_synced: SyncedFunc | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("poll interval must be positive")
        self.interval = interval
        self._report = report
        self._on_target_gone = on_target_gone
        self._on_synced = on_synced

    def schedule(self, session: EditSession) -> None:
        loop = asyncio.get_running_loop()
        session.poll_handle = loop.call_later(self.interval, self._run, session)

    def tick(self, session: EditSession) -> bool:
        """Run one poll step. Returns False when polling must stop."""

        if session.state is not SessionState.POLLING:
            return False

        if not session.target_alive():
            logger.debug("Target of %s is gone, abandoning session", session.path)
            self._on_target_gone(session)
            return False

        check_for_changes(session, self._report, self._on_synced)
        return session.state is SessionState.POLLING

    def _run(self, session: EditSession) -> None:
        session.poll_handle = None
        if self.tick(session):
            self.schedule(session)
