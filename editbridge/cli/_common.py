"""Shared helpers for editbridge CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from ..app import AppContext, bootstrap
from ..config import ConfigError, MissingConfigError

CONTEXT_SETTINGS: dict[str, Any] = {"help_option_names": ["-h", "--help"]}


class EditBridgeCliError(click.ClickException):
    """Shared Click exception wrapper for CLI failures."""


def get_app(
    ctx: click.Context,
    *,
    editor: str | None = None,
    poll_interval_ms: int | None = None,
) -> AppContext:
    """Return a cached AppContext for the current CLI invocation."""

    app: AppContext | None = ctx.obj.get("app")
    if app is not None:
        return app

    config_path_opt: Path | None = ctx.obj.get("config_path")

    try:
        app = bootstrap(
            config_path_opt, editor=editor, poll_interval_ms=poll_interval_ms
        )
    except MissingConfigError as exc:
        raise EditBridgeCliError(
            f"Configuration not found at {exc.path}. Run 'eb config' to create it."
        ) from exc
    except ConfigError as exc:
        raise EditBridgeCliError(str(exc)) from exc

    ctx.obj["app"] = app
    return app
