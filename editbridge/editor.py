"""Launching external editors on temporary copies of host content."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import weakref
from pathlib import Path
from typing import Any

from .config import FILE_PLACEHOLDER, EditBridgeConfig
from .poller import ChangePoller
from .reaper import Reaper
from .session import Consumer, EditSession, EditTarget, Reporter, SessionState

logger = logging.getLogger(__name__)


class EditorError(RuntimeError):
    """Base error for external editor sessions."""


class NotConfiguredError(EditorError):
    """Raised when no external editor command is configured."""


class SpawnError(EditorError):
    """Raised when the external editor process cannot be started."""


class EditorIOError(EditorError):
    """Raised when the temporary file cannot be written or read."""


class NoEditableTargetError(EditorError):
    """Raised when the host has nothing that can be edited."""


class TargetBusyError(EditorError):
    """Raised when the target is already being edited by another session."""


def build_command(template: str, path: Path) -> list[str]:
    """Turn an editor command template into an argv list for ``path``.

    The template is split on whitespace and every ``<file>`` placeholder is
    replaced by the path. Without a placeholder the path is appended.
    """

    tokens = template.split()
    if not tokens:
        raise NotConfiguredError("Setting 'editor' is empty")

    if not any(FILE_PLACEHOLDER in token for token in tokens):
        return [*tokens, str(path)]
    return [token.replace(FILE_PLACEHOLDER, str(path)) for token in tokens]


def _log_failure(target: Any, message: str) -> None:
    logger.error("%r: %s", target, message)


class ExternalEditor:
    """Start and track external edit sessions on the running asyncio loop."""

    def __init__(
        self,
        config: EditBridgeConfig,
        *,
        report: Reporter | None = None,
        hook: Any | None = None,
    ) -> None:
        self.config = config
        self.report: Reporter = report or _log_failure
        self._hook = hook
        self._sessions: dict[Path, EditSession] = {}
        self._by_target: weakref.WeakKeyDictionary[Any, EditSession] = (
            weakref.WeakKeyDictionary()
        )
        self._launching: weakref.WeakSet[Any] = weakref.WeakSet()
        self.reaper = Reaper(
            self.report, on_synced=self._content_synced, on_closed=self._closed
        )
        self.poller = ChangePoller(
            config.poll_interval,
            self.report,
            on_target_gone=self._abandon,
            on_synced=self._content_synced,
        )

    @property
    def sessions(self) -> tuple[EditSession, ...]:
        return tuple(self._sessions.values())

    def session_for(self, target: EditTarget) -> EditSession | None:
        session = self._by_target.get(target)
        if session is None or session.finalized:
            return None
        return session

    async def start_session(
        self, content: str, target: EditTarget, consumer: Consumer
    ) -> EditSession:
        """Open ``content`` in the configured editor and watch it for changes.

        ``consumer`` receives the full file content after every detected
        change, for as long as ``target`` stays alive.

        Raises
        ------
        NotConfiguredError
            If no editor command is configured.
        TargetBusyError
            If ``target`` already has a session in flight.
        EditorIOError
            If the temporary file cannot be created or written.
        SpawnError
            If the editor process cannot be started.
        """

        template = self.config.editor
        if not template or not template.strip():
            raise NotConfiguredError("Setting 'editor' is not set")
        if target in self._launching or self.session_for(target) is not None:
            raise TargetBusyError("Target is already open in an external editor")

        self._launching.add(target)
        try:
            path, mtime_ns = self._write_temp_file(content)
            argv = build_command(template, path)
            logger.debug("Starting external editor: %s", argv)
            try:
                process = await asyncio.create_subprocess_exec(*argv)
            except (OSError, ValueError) as exc:
                _discard(path)
                raise SpawnError(f"{argv[0]}: could not spawn process: {exc}") from exc
            except BaseException:
                # Cancelled mid-spawn: nothing will ever own the file.
                _discard(path)
                raise
        finally:
            self._launching.discard(target)

        session = EditSession.create(
            path,
            target,
            consumer,
            mtime_ns=mtime_ns,
            encoding=self.config.encoding,
        )
        session.process = process
        session.pid = process.pid
        session.state = SessionState.POLLING
        self._sessions[path] = session
        self._by_target[target] = session

        self.reaper.watch(session)
        self.poller.schedule(session)
        self._call_hook("session_started", session=session)
        return session

    def _write_temp_file(self, content: str) -> tuple[Path, int]:
        temp_dir = self.config.temp_dir
        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix=self.config.prefix, suffix=self.config.suffix, dir=temp_dir
            )
        except OSError as exc:
            raise EditorIOError(f"Cannot create temporary file: {exc}") from exc

        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding=self.config.encoding, newline="") as fh:
                fh.write(content)
            mtime_ns = path.stat().st_mtime_ns
        except (OSError, UnicodeEncodeError) as exc:
            _discard(path)
            raise EditorIOError(f"Cannot write temporary file {path}: {exc}") from exc
        return path, mtime_ns

    def _abandon(self, session: EditSession) -> None:
        self.reaper.finalize(session, sync=False)

    def _content_synced(self, session: EditSession, content: str) -> None:
        self._call_hook("content_synced", session=session, content=content)

    def _closed(self, session: EditSession) -> None:
        self._sessions.pop(session.path, None)
        target = session.target
        if target is not None and self._by_target.get(target) is session:
            del self._by_target[target]
        self._call_hook("session_closed", session=session)

    def _call_hook(self, name: str, **kwargs: Any) -> None:
        if self._hook is None:
            return
        try:
            getattr(self._hook, name)(**kwargs)
        except Exception:
            # Runs inside loop callbacks; a broken plugin must not stop polling.
            logger.exception("Plugin hook '%s' failed", name)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:  # pragma: no cover - best effort on error paths
        logger.warning("Cannot remove %s: %s", path, exc)
