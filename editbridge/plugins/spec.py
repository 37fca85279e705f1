"""Hook specifications for editbridge plugins."""

from __future__ import annotations

from ..session import EditSession
from ._markers import hookspec
from .types import BootstrapContext


class EditBridgeHookSpec:
    """Collection of pluggy hook specifications."""

    @hookspec
    def bootstrap(self, context: BootstrapContext) -> None:
        """Prepare the plugin once configuration has been loaded."""

    @hookspec
    def session_started(self, session: EditSession) -> None:
        """Called after the external editor was spawned for ``session``."""

    @hookspec
    def content_synced(self, session: EditSession, content: str) -> None:
        """Called after ``content`` was delivered to the session consumer."""

    @hookspec
    def session_closed(self, session: EditSession) -> None:
        """Called once the session's temporary file has been removed."""
