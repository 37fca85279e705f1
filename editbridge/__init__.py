"""Round-trip text through an external editor without blocking the host loop."""

from __future__ import annotations

from .config import EditBridgeConfig
from .editor import (
    EditorError,
    EditorIOError,
    ExternalEditor,
    NoEditableTargetError,
    NotConfiguredError,
    SpawnError,
    TargetBusyError,
)
from .session import EditSession, SessionState

__all__ = [
    "EditBridgeConfig",
    "EditSession",
    "EditorError",
    "EditorIOError",
    "ExternalEditor",
    "NoEditableTargetError",
    "NotConfiguredError",
    "SessionState",
    "SpawnError",
    "TargetBusyError",
]

__version__ = "0.1.0"
