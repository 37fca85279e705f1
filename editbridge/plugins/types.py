"""Type definitions for editbridge plugin contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from ..config import EditBridgeConfig


class PluginSettingsGetter(Protocol):
    """Callable returning the ``[plugins.<id>]`` table for a plugin."""

    def __call__(
        self,
        plugin_id: str,
        *,
        default: Mapping[str, Any] | None = None,
    ) -> Mapping[str, Any]:  # pragma: no cover - Protocol
        ...


@dataclass(slots=True, frozen=True)
class BootstrapContext:
    """Information handed to plugins once configuration is loaded."""

    config: EditBridgeConfig
    get_settings: PluginSettingsGetter
