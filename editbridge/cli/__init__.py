"""editbridge CLI package."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import click

from . import config_cmd, edit
from ._common import CONTEXT_SETTINGS, EditBridgeCliError

__all__ = ["cli", "main", "EditBridgeCliError"]

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-c",
    "--config",
    "config_path_opt",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to configuration TOML file.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase log output (-v for info, -vv for debug).",
)
@click.pass_context
def cli(ctx: click.Context, config_path_opt: Path | None, verbose: int) -> None:
    """editbridge command group."""

    ctx.ensure_object(dict)
    invoked = ctx.invoked_subcommand

    if invoked is None:
        click.echo(ctx.command.get_help(ctx))
        ctx.exit(0)

    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    ctx.obj["config_path"] = config_path_opt


for register_command in (
    edit.register,
    config_cmd.register,
):
    register_command(cli)


def main(argv: Sequence[str] | None = None) -> int:
    args = list(argv) if argv is not None else None
    try:
        result = cli.main(args=args, prog_name="eb", standalone_mode=False)
        return int(result or 0)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        return int(exc.code or 0)
