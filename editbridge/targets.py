"""Host-side targets whose content can be round-tripped through an editor."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .editor import EditorIOError, NoEditableTargetError


class EditableTarget(Protocol):
    """A target that can hand out its content and accept edited content back."""

    def is_alive(self) -> bool:  # pragma: no cover - Protocol
        ...

    def read(self) -> str:  # pragma: no cover - Protocol
        """Return the current content or raise ``NoEditableTargetError``."""

    def write(self, content: str) -> None:  # pragma: no cover - Protocol
        """Replace the target content with ``content``."""


class FileTarget:
    """A text file on disk, edited as a whole.

    The target stays alive for as long as the file exists; deleting the file
    abandons any session editing it.
    """

    def __init__(self, path: Path, *, encoding: str = "utf-8") -> None:
        self.path = path.expanduser().resolve()
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"FileTarget({str(self.path)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileTarget):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def is_alive(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        if not self.path.is_file():
            raise NoEditableTargetError(f"No editable file at {self.path}")
        try:
            with self.path.open("r", encoding=self.encoding, newline="") as fh:
                return fh.read()
        except UnicodeDecodeError as exc:
            raise NoEditableTargetError(
                f"{self.path} is not a {self.encoding} text file"
            ) from exc
        except OSError as exc:
            raise EditorIOError(f"Cannot read {self.path}: {exc}") from exc

    def write(self, content: str) -> None:
        with self.path.open("w", encoding=self.encoding, newline="") as fh:
            fh.write(content)


class BufferTarget:
    """An in-memory text field, alive until :meth:`close` is called.

    ``value`` of ``None`` means there is no editable field.
    """

    def __init__(self, value: str | None = "") -> None:
        self.value = value
        self.history: list[str] = []
        self._open = True

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"<BufferTarget {state} len={len(self.value or '')}>"

    def is_alive(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False

    def read(self) -> str:
        if self.value is None:
            raise NoEditableTargetError("No active text element")
        return self.value

    def write(self, content: str) -> None:
        self.value = content
        self.history.append(content)
