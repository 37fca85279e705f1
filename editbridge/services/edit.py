"""High-level edit workflows used by the CLI and embedding hosts."""

from __future__ import annotations

import asyncio
import weakref
from typing import Callable

from ..app import AppContext
from ..editor import EditorError, ExternalEditor
from ..session import Consumer, EditSession, Reporter
from ..targets import EditableTarget

WarnFunc = Callable[[str], None]


def write_back(target: EditableTarget) -> Consumer:
    """Return a consumer writing content into ``target`` without keeping it alive."""

    ref = weakref.ref(target)

    def consume(content: str) -> None:
        live = ref()
        if live is not None:
            live.write(content)

    return consume


async def edit_target(
    editor: ExternalEditor,
    target: EditableTarget,
    *,
    report: Reporter | None = None,
    warn: WarnFunc | None = None,
) -> EditSession | None:
    """Open the content of ``target`` in the external editor.

    Failures are routed to ``report`` (the editor's reporter by default)
    and ``None`` is returned instead of a session.
    """

    sink = report or editor.report
    try:
        content = target.read()
        if not content and warn is not None:
            warn("No contents - opening empty file")
        return await editor.start_session(content, target, write_back(target))
    except EditorError as exc:
        sink(target, str(exc))
        return None


def run_edit(
    ctx: AppContext,
    target: EditableTarget,
    *,
    report: Reporter | None = None,
    warn: WarnFunc | None = None,
) -> EditSession | None:
    """Edit ``target`` on a fresh event loop and wait for the editor to exit."""

    async def _run() -> EditSession | None:
        editor = ExternalEditor(ctx.config, report=report, hook=ctx.hook)
        session = await edit_target(editor, target, warn=warn)
        if session is not None:
            await session.wait_closed()
        return session

    return asyncio.run(_run())
