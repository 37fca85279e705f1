"""Application bootstrap and context container for editbridge."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import pluggy

from .config import ConfigError, EditBridgeConfig, load_config, load_config_or_default
from .plugins import BootstrapContext, build_settings_getter, get_plugin_manager
from .plugins.manager import run_bootstrap_hooks


@dataclass(slots=True)
class AppContext:
    """Aggregates configuration and the plugin manager for the CLI lifecycle."""

    config: EditBridgeConfig
    plugin_manager: pluggy.PluginManager

    @property
    def hook(self) -> pluggy.HookRelay:
        return self.plugin_manager.hook


def bootstrap(
    config_path: Path | None,
    *,
    editor: str | None = None,
    poll_interval_ms: int | None = None,
) -> AppContext:
    """Load configuration, apply overrides and run plugin bootstrap hooks.

    An explicit ``config_path`` must exist; the default location is optional.
    """

    # Defer error mapping to the CLI, which knows how to present messages.
    if config_path is not None:
        config = load_config(config_path)
    else:
        config = load_config_or_default()

    if editor is not None:
        config = replace(config, editor=editor)
    if poll_interval_ms is not None:
        if poll_interval_ms <= 0:
            raise ConfigError("Poll interval must be a positive number of ms")
        config = replace(config, poll_interval_ms=poll_interval_ms)

    manager = get_plugin_manager()
    bootstrap_context = BootstrapContext(
        config=config, get_settings=build_settings_getter(config)
    )
    bootstrap_errors = run_bootstrap_hooks(manager, bootstrap_context)
    if bootstrap_errors:
        first_error = bootstrap_errors[0]
        raise ConfigError(f"Plugin bootstrap failed: {first_error}") from first_error

    return AppContext(config=config, plugin_manager=manager)
