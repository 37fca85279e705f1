"""Helpers for creating and working with the editbridge plugin manager."""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import Tuple

import pluggy

from ._markers import ENTRY_POINT_GROUP, PLUGIN_NAMESPACE
from .spec import EditBridgeHookSpec
from .types import BootstrapContext


class PluginRegistrationError(RuntimeError):
    """Raised when a plugin fails validation or registration."""


def create_plugin_manager(*, load_entry_points: bool = True) -> pluggy.PluginManager:
    """Instantiate a pluggy ``PluginManager`` configured for editbridge."""

    manager = pluggy.PluginManager(PLUGIN_NAMESPACE)
    manager.add_hookspecs(EditBridgeHookSpec)

    if load_entry_points:
        load_plugin_entry_points(manager)

    return manager


def register_modules(
    manager: pluggy.PluginManager,
    modules: Sequence[object],
) -> None:
    """Register in-process plugin modules with the manager."""

    for module in modules:
        try:
            manager.register(module)
        except pluggy.PluginValidationError as exc:
            raise PluginRegistrationError(str(exc)) from exc


def run_bootstrap_hooks(
    manager: pluggy.PluginManager,
    context: BootstrapContext,
) -> list[Exception]:
    """Execute bootstrap hooks, collecting exceptions per plugin."""

    hook_impls = list(manager.hook.bootstrap.get_hookimpls())
    if not hook_impls:
        return []

    plugins_in_order = [impl.plugin for impl in hook_impls]
    errors: list[Exception] = []

    for plugin in plugins_in_order:
        others = [p for p in plugins_in_order if p is not plugin]
        subset = manager.subset_hook_caller("bootstrap", others)
        try:
            subset(context=context)
        except Exception as exc:
            errors.append(exc)

    return errors


def load_plugin_entry_points(
    manager: pluggy.PluginManager,
    *,
    group: str = ENTRY_POINT_GROUP,
) -> None:
    """Load plugin entry points via ``importlib.metadata`` integration."""

    manager.load_setuptools_entrypoints(group)


@lru_cache(maxsize=1)
def _builtin_plugin_modules() -> Tuple[object, ...]:
    from .builtin import BUILTIN_PLUGINS

    return BUILTIN_PLUGINS


@lru_cache(maxsize=1)
def _build_plugin_manager() -> pluggy.PluginManager:
    manager = create_plugin_manager()
    register_modules(manager, _builtin_plugin_modules())
    return manager


def get_plugin_manager() -> pluggy.PluginManager:
    """Return the cached plugin manager instance."""

    return _build_plugin_manager()


def reset_plugin_manager_cache() -> None:
    """Clear cached plugin manager so future calls rebuild state."""

    _build_plugin_manager.cache_clear()
    _builtin_plugin_modules.cache_clear()


__all__ = [
    "PluginRegistrationError",
    "create_plugin_manager",
    "get_plugin_manager",
    "load_plugin_entry_points",
    "register_modules",
    "reset_plugin_manager_cache",
    "run_bootstrap_hooks",
]
