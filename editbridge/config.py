"""Configuration management for editbridge."""

from __future__ import annotations

import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_DIR = Path("~/.config/editbridge").expanduser()
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"
DEFAULT_POLL_INTERVAL_MS = 100
DEFAULT_ENCODING = "utf-8"
DEFAULT_SUFFIX = ".txt"
DEFAULT_PREFIX = "editbridge"
FILE_PLACEHOLDER = "<file>"


class ConfigError(RuntimeError):
    """Base error for configuration related issues."""


class MissingConfigError(ConfigError):
    """Raised when the configuration file cannot be found."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Configuration file not found at {path}")
        self.path = path


class InvalidConfigError(ConfigError):
    """Raised when the configuration file contains malformed values."""


@dataclass(slots=True)
class EditBridgeConfig:
    """In-memory representation of the editbridge configuration file."""

    editor: str | None = None
    temp_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    encoding: str = DEFAULT_ENCODING
    suffix: str = DEFAULT_SUFFIX
    prefix: str = DEFAULT_PREFIX
    plugins: dict[str, dict[str, Any]] = field(default_factory=dict)
    source_path: Path | None = None

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds, as expected by the event loop."""
        return self.poll_interval_ms / 1000


def load_config(path: Path | None = None) -> EditBridgeConfig:
    """Load configuration from ``path`` or the default location.

    Parameters
    ----------
    path:
        Optional location of the configuration file. When ``None`` the default
        path (``~/.config/editbridge/config.toml``) is used.

    Raises
    ------
    MissingConfigError
        If the file cannot be found.
    InvalidConfigError
        If a setting has the wrong type or value.
    """

    config_path = (path or DEFAULT_CONFIG_PATH).expanduser()
    if not config_path.exists():
        raise MissingConfigError(config_path)

    try:
        with config_path.open("rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidConfigError(f"Cannot parse {config_path}: {exc}") from exc

    section = raw.get("editbridge", {})
    if not isinstance(section, dict):
        raise InvalidConfigError("'editbridge' section must be a table")

    base_dir = config_path.parent if path is not None else DEFAULT_CONFIG_DIR
    config_dir = base_dir.expanduser()

    editor = section.get("editor")
    if editor is not None:
        if not isinstance(editor, str):
            raise InvalidConfigError("'editor' must be a string when provided")
        editor = editor.strip() or None

    # Relative temp directories are resolved against the configuration
    # directory, like every other path in the file.
    temp_dir_raw = section.get("temp_dir")
    if temp_dir_raw is None:
        temp_dir = Path(tempfile.gettempdir())
    elif isinstance(temp_dir_raw, str) and temp_dir_raw.strip():
        td = Path(temp_dir_raw.strip()).expanduser()
        temp_dir = (td if td.is_absolute() else (config_dir / td)).resolve()
    else:
        raise InvalidConfigError("'temp_dir' must be a non-empty string")

    interval = section.get("poll_interval_ms", DEFAULT_POLL_INTERVAL_MS)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
        raise InvalidConfigError("'poll_interval_ms' must be a positive integer")

    encoding = _optional_str(section, "encoding", DEFAULT_ENCODING)
    try:
        "".encode(encoding)
    except LookupError as exc:
        raise InvalidConfigError(f"Unknown encoding '{encoding}'") from exc

    plugins_section = raw.get("plugins")
    plugins: dict[str, dict[str, Any]] = {}
    if isinstance(plugins_section, dict):
        for key, value in plugins_section.items():
            plugins[key] = dict(value) if isinstance(value, dict) else {}

    return EditBridgeConfig(
        editor=editor,
        temp_dir=temp_dir,
        poll_interval_ms=interval,
        encoding=encoding,
        suffix=_optional_str(section, "suffix", DEFAULT_SUFFIX, allow_empty=True),
        prefix=_optional_str(section, "prefix", DEFAULT_PREFIX, allow_empty=True),
        plugins=plugins,
        source_path=config_path,
    )


def load_config_or_default(path: Path | None = None) -> EditBridgeConfig:
    """Like :func:`load_config`, but fall back to defaults when the file is absent."""

    try:
        return load_config(path)
    except MissingConfigError:
        return EditBridgeConfig()


def bootstrap_config_file(path: Path) -> bool:
    """Create a default config file if missing.

    Returns True when the file was created, False if it already existed.
    """

    if path.exists():
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    default_content = (
        "[editbridge]\n"
        f'editor = "vim {FILE_PLACEHOLDER}"\n'
        f"poll_interval_ms = {DEFAULT_POLL_INTERVAL_MS}\n"
        f'encoding = "{DEFAULT_ENCODING}"\n'
    )
    path.write_text(default_content, encoding="utf-8")
    return True


def _optional_str(
    section: dict[str, Any], key: str, default: str, *, allow_empty: bool = False
) -> str:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or (not allow_empty and not value.strip()):
        raise InvalidConfigError(f"'{key}' must be a string when provided")
    return value.strip()
