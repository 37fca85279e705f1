"""editbridge plugin infrastructure based on pluggy."""

from __future__ import annotations

from ._markers import ENTRY_POINT_GROUP, PLUGIN_NAMESPACE, hookimpl, hookspec
from .config import build_settings_getter
from .manager import (
    PluginRegistrationError,
    create_plugin_manager,
    get_plugin_manager,
    register_modules,
    reset_plugin_manager_cache,
)
from .types import BootstrapContext

__all__ = [
    "BootstrapContext",
    "ENTRY_POINT_GROUP",
    "PLUGIN_NAMESPACE",
    "PluginRegistrationError",
    "build_settings_getter",
    "create_plugin_manager",
    "get_plugin_manager",
    "hookimpl",
    "hookspec",
    "register_modules",
    "reset_plugin_manager_cache",
]
