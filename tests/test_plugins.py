"""Tests covering lifecycle hooks and plugin bootstrap."""

from __future__ import annotations

import asyncio
import logging
import types
from pathlib import Path

import pytest
from editbridge.app import bootstrap
from editbridge.config import ConfigError
from editbridge.editor import ExternalEditor
from editbridge.plugins import create_plugin_manager, hookimpl, register_modules
from editbridge.plugins import manager as plugin_manager
from editbridge.plugins.builtin import audit
from editbridge.session import EditSession
from editbridge.targets import BufferTarget


def _recording_plugin(events: list[tuple[str, object]]) -> types.ModuleType:
    module = types.ModuleType("editbridge_test_plugin")

    @hookimpl
    def session_started(session: EditSession) -> None:
        events.append(("started", session.pid))

    @hookimpl
    def content_synced(session: EditSession, content: str) -> None:
        events.append(("synced", content))

    @hookimpl
    def session_closed(session: EditSession) -> None:
        events.append(("closed", session.changes))

    module.session_started = session_started
    module.content_synced = content_synced
    module.session_closed = session_closed
    return module


def test_lifecycle_hooks_fire_in_order(make_config, fake_editor) -> None:
    events: list[tuple[str, object]] = []
    manager = create_plugin_manager(load_entry_points=False)
    register_modules(manager, [_recording_plugin(events)])
    editor = ExternalEditor(
        make_config(fake_editor('save("v2")\n')), hook=manager.hook
    )

    async def scenario() -> EditSession:
        target = BufferTarget("v1")
        session = await editor.start_session("v1", target, print)
        await session.wait_closed()
        return session

    session = asyncio.run(scenario())

    assert events == [("started", session.pid), ("synced", "v2"), ("closed", 1)]


def test_failing_hook_does_not_break_the_session(
    make_config, fake_editor, caplog
) -> None:
    module = types.ModuleType("editbridge_broken_plugin")

    @hookimpl
    def content_synced(session: EditSession, content: str) -> None:
        raise RuntimeError("boom")

    module.content_synced = content_synced
    manager = create_plugin_manager(load_entry_points=False)
    register_modules(manager, [module])
    editor = ExternalEditor(
        make_config(fake_editor('save("v2")\n')), hook=manager.hook
    )
    calls: list[str] = []

    async def scenario() -> EditSession:
        target = BufferTarget("v1")
        session = await editor.start_session("v1", target, calls.append)
        await session.wait_closed()
        return session

    with caplog.at_level(logging.ERROR, logger="editbridge.editor"):
        session = asyncio.run(scenario())

    assert calls == ["v2"]
    assert not session.path.exists()
    assert "Plugin hook 'content_synced' failed" in caplog.text


def test_audit_plugin_logs_lifecycle(
    make_config, fake_editor, caplog, monkeypatch
) -> None:
    monkeypatch.setattr(audit, "_level", logging.INFO)
    manager = plugin_manager.get_plugin_manager()
    editor = ExternalEditor(
        make_config(fake_editor('save("v2")\n')), hook=manager.hook
    )

    async def scenario() -> None:
        target = BufferTarget("v1")
        session = await editor.start_session("v1", target, print)
        await session.wait_closed()

    with caplog.at_level(logging.INFO, logger="editbridge.audit"):
        asyncio.run(scenario())

    messages = [r.getMessage() for r in caplog.records if r.name == "editbridge.audit"]
    assert any("opened" in m for m in messages)
    assert any(m.startswith("change 1 from") for m in messages)
    assert any("after 1 change(s)" in m for m in messages)


def test_bootstrap_applies_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[editbridge]\neditor = "vim"\n', encoding="utf-8")

    app = bootstrap(config_path, editor="nano <file>", poll_interval_ms=5)

    assert app.config.editor == "nano <file>"
    assert app.config.poll_interval_ms == 5
    assert app.hook is app.plugin_manager.hook


def test_bootstrap_reports_plugin_failure(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[plugins.audit]\nlevel = "loud"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="Plugin bootstrap failed"):
        bootstrap(config_path)


def test_audit_level_comes_from_settings(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(audit, "_level", logging.INFO)
    config_path = tmp_path / "config.toml"
    config_path.write_text('[plugins.audit]\nlevel = "debug"\n', encoding="utf-8")

    bootstrap(config_path)

    assert audit._level == logging.DEBUG


def test_shared_manager_registers_builtin_plugins() -> None:
    manager = plugin_manager.get_plugin_manager()

    assert manager.is_registered(audit)
    assert plugin_manager.get_plugin_manager() is manager

    plugin_manager.reset_plugin_manager_cache()
    assert plugin_manager.get_plugin_manager() is not manager
