"""Edit command for editbridge CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from ..services.edit import run_edit
from ..targets import BufferTarget, FileTarget
from ._common import get_app


@click.command(name="edit")
@click.argument("path", type=click.Path(path_type=Path, allow_dash=True))
@click.option(
    "-e",
    "--editor",
    "editor_cmd",
    default=None,
    help="Editor command; '<file>' is replaced by the temporary file path.",
)
@click.option(
    "-i",
    "--interval",
    "interval_ms",
    type=click.IntRange(min=1),
    default=None,
    help="Milliseconds between checks for saved changes.",
)
@click.pass_context
def edit(
    ctx: click.Context,
    path: Path,
    editor_cmd: str | None,
    interval_ms: int | None,
) -> None:
    """Edit PATH in an external editor, syncing every save back to it.

    With '-' the text is read from stdin and the final version is written to
    stdout once the editor exits.
    """

    app = get_app(ctx, editor=editor_cmd, poll_interval_ms=interval_ms)

    def report(target: Any, message: str) -> None:
        click.echo(f"Error: {message}", err=True)

    from_stdin = str(path) == "-"
    if from_stdin:
        target: BufferTarget | FileTarget = BufferTarget(
            click.get_text_stream("stdin").read()
        )
    else:
        target = FileTarget(path, encoding=app.config.encoding)

    session = run_edit(
        app, target, report=report, warn=lambda msg: click.echo(msg, err=True)
    )
    if session is None:
        ctx.exit(1)

    if isinstance(target, BufferTarget):
        click.echo(target.value or "", nl=False)
        return

    click.echo(f"Synced {session.changes} change(s) to {target.path}")


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(edit)
