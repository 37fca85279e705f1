"""Shared state for one outstanding external edit."""

from __future__ import annotations

import asyncio
import weakref
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol

Consumer = Callable[[str], Any]
Reporter = Callable[[Any, str], None]


class EditTarget(Protocol):
    """Host entity owning the content being edited (a page, a form field...)."""

    def is_alive(self) -> bool:  # pragma: no cover - Protocol
        """Return False once the target has gone away."""


class SessionState(Enum):
    LAUNCHING = "launching"
    POLLING = "polling"
    FINALIZING = "finalizing"
    DESTROYED = "destroyed"


@dataclass(eq=False)
class EditSession:
    """Tracked state of one external edit.

    The session holds only a weak reference to its target so that closing
    the target on the host side is never delayed by a pending edit.
    """

    path: Path
    consumer: Consumer
    target_ref: weakref.ReferenceType[Any]
    last_seen_mtime_ns: int
    encoding: str = "utf-8"
    process: asyncio.subprocess.Process | None = None
    pid: int | None = None
    state: SessionState = SessionState.LAUNCHING
    returncode: int | None = None
    changes: int = 0
    poll_handle: asyncio.TimerHandle | None = None
    reap_task: asyncio.Task[None] | None = None
    _closed: asyncio.Event = field(
        default_factory=asyncio.Event, init=False, repr=False
    )

    @classmethod
    def create(
        cls,
        path: Path,
        target: EditTarget,
        consumer: Consumer,
        *,
        mtime_ns: int,
        encoding: str = "utf-8",
    ) -> EditSession:
        return cls(
            path=path,
            consumer=consumer,
            target_ref=weakref.ref(target),
            last_seen_mtime_ns=mtime_ns,
            encoding=encoding,
        )

    @property
    def target(self) -> EditTarget | None:
        return self.target_ref()

    def target_alive(self) -> bool:
        target = self.target_ref()
        return target is not None and target.is_alive()

    def advance_mtime(self, mtime_ns: int) -> bool:
        """Record ``mtime_ns`` if it is newer than the last seen change.

        Returns True when the caller now owns the change and must deliver it.
        """

        if mtime_ns <= self.last_seen_mtime_ns:
            return False
        self.last_seen_mtime_ns = mtime_ns
        return True

    @property
    def finalized(self) -> bool:
        return self.state in (SessionState.FINALIZING, SessionState.DESTROYED)

    @property
    def closed(self) -> bool:
        """True once the session is destroyed and its process has been reaped."""
        return self.state is SessionState.DESTROYED and self.process is None

    def release_process(self, returncode: int | None) -> None:
        self.returncode = returncode
        self.process = None
        self.reap_task = None
        self.notify_if_closed()

    def notify_if_closed(self) -> None:
        if self.closed:
            self._closed.set()

    async def wait_closed(self) -> None:
        """Wait until the temp file is gone and the external program exited."""
        await self._closed.wait()
