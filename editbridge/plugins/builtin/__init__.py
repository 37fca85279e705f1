"""Built-in editbridge plugins."""

from __future__ import annotations

from . import audit

BUILTIN_PLUGINS = (audit,)

__all__ = ["BUILTIN_PLUGINS"]
