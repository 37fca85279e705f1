"""Tests for the 'eb' CLI commands."""

from __future__ import annotations

from pathlib import Path

import click
from click.testing import CliRunner
from editbridge import cli
from editbridge import config as config_module
from editbridge.cli import config_cmd


def _write_config(base_dir: Path, editor: str | None = None) -> Path:
    config_path = base_dir / "config.toml"
    lines = ["[editbridge]", f'temp_dir = "{base_dir / "edits"}"']
    if editor is not None:
        lines.append(f"editor = '{editor}'")
    config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return config_path


def test_edit_syncs_saves_back_to_file(tmp_path: Path, fake_editor) -> None:
    command = fake_editor(
        """
        save(load() + " world")
        time.sleep(0.2)
        """
    )
    config_path = _write_config(tmp_path, editor=command)
    document = tmp_path / "doc.txt"
    document.write_text("hello", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["-c", str(config_path), "edit", "-i", "10", str(document)]
    )

    assert result.exit_code == 0, result.output
    assert document.read_text(encoding="utf-8") == "hello world"
    assert "Synced 1 change(s)" in result.output
    assert list((tmp_path / "edits").iterdir()) == []


def test_edit_stdin_prints_final_text(tmp_path: Path, fake_editor) -> None:
    command = fake_editor('save(load().upper())\n')
    config_path = _write_config(tmp_path)

    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        ["-c", str(config_path), "edit", "--editor", command, "-"],
        input="shout this",
    )

    assert result.exit_code == 0, result.output
    assert result.output.endswith("SHOUT THIS")


def test_edit_without_editor_setting_fails(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)
    document = tmp_path / "doc.txt"
    document.write_text("hello", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli.cli, ["-c", str(config_path), "edit", str(document)])

    assert result.exit_code == 1
    assert "Setting 'editor' is not set" in result.output


def test_edit_missing_file_fails(tmp_path: Path, fake_editor) -> None:
    config_path = _write_config(tmp_path, editor=fake_editor("pass\n"))

    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["-c", str(config_path), "edit", str(tmp_path / "nope.txt")]
    )

    assert result.exit_code == 1
    assert "No editable file" in result.output


def test_explicit_missing_config_is_an_error(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["-c", str(tmp_path / "absent.toml"), "edit", "-"], input="x"
    )

    assert result.exit_code != 0
    assert "Run 'eb config'" in result.output


def test_config_command_bootstraps_file(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "conf" / "config.toml"
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", config_path)
    monkeypatch.setattr(config_cmd, "DEFAULT_CONFIG_PATH", config_path)
    opened: list[str] = []

    def fake_edit(filename: str | None = None, **kwargs) -> None:
        opened.append(filename or "")
        return None

    monkeypatch.setattr(click, "edit", fake_edit)

    runner = CliRunner()
    result = runner.invoke(cli.cli, ["config"])

    assert result.exit_code == 0, result.output
    assert config_path.exists()
    assert opened == [str(config_path)]
    assert f"Created configuration at {config_path}" in result.output


def test_main_returns_exit_code(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)
    document = tmp_path / "doc.txt"
    document.write_text("hello", encoding="utf-8")

    assert cli.main(["-c", str(config_path), "edit", str(document)]) == 1
    assert cli.main(["--help"]) == 0
