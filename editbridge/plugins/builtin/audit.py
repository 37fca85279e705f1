"""Built-in plugin recording session lifecycle events in the log."""

from __future__ import annotations

import logging

from ...session import EditSession
from .._markers import hookimpl
from ..types import BootstrapContext

PLUGIN_ID = "audit"

logger = logging.getLogger("editbridge.audit")

_level = logging.INFO


@hookimpl
def bootstrap(context: BootstrapContext) -> None:
    """Read ``[plugins.audit] level`` from the configuration."""

    global _level
    settings = context.get_settings(PLUGIN_ID)
    name = str(settings.get("level", "info")).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"audit: unknown log level '{name}'")
    _level = level


@hookimpl
def session_started(session: EditSession) -> None:
    logger.log(_level, "editor pid %s opened %s", session.pid, session.path)


@hookimpl
def content_synced(session: EditSession, content: str) -> None:
    logger.log(
        _level,
        "change %d from %s (%d chars)",
        session.changes,
        session.path,
        len(content),
    )


@hookimpl
def session_closed(session: EditSession) -> None:
    logger.log(
        _level, "closed %s after %d change(s)", session.path, session.changes
    )
