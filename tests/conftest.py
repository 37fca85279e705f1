from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest
from editbridge.config import EditBridgeConfig
from editbridge.plugins import reset_plugin_manager_cache

SCRIPT_HEADER = '''\
import os
import sys
import time

path = sys.argv[1]


def load():
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def save(text):
    # Replace atomically so a poll never observes a half-written file, and
    # push the mtime forward so coarse filesystem clocks still see a change.
    tmp = path + ".new"
    with open(tmp, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    st = os.stat(tmp)
    os.utime(tmp, ns=(st.st_atime_ns, st.st_mtime_ns + 2_000_000_000))
    os.replace(tmp, path)

'''


@pytest.fixture
def fake_editor(tmp_path: Path) -> Callable[[str], str]:
    """Write a Python 'editor' script and return a command template for it."""

    def make(body: str, name: str = "fake_editor.py") -> str:
        script = tmp_path / name
        script.write_text(SCRIPT_HEADER + textwrap.dedent(body), encoding="utf-8")
        return f"{sys.executable} {script} <file>"

    return make


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "edits"
    path.mkdir()
    return path


@pytest.fixture
def make_config(temp_dir: Path) -> Callable[..., EditBridgeConfig]:
    def make(editor: str | None, **overrides) -> EditBridgeConfig:
        settings = {"temp_dir": temp_dir, "poll_interval_ms": 10, **overrides}
        return EditBridgeConfig(editor=editor, **settings)

    return make


@pytest.fixture(autouse=True)
def reset_plugins() -> None:
    reset_plugin_manager_cache()
    yield
    reset_plugin_manager_cache()
