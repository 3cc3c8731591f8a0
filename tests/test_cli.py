"""Test CLI commands."""

import sys
from pathlib import Path
from typing import List

import pytest
from click.testing import CliRunner, Result

from herfiles.cli import cli


@pytest.fixture
def cli_runner(home: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Return a CLI runner working against the throwaway home."""
    # setup_logging installs its own excepthook
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    return CliRunner()


def invoke(runner: CliRunner, args: List[str], input: str = "") -> Result:
    return runner.invoke(cli, args, input=input, env={"COLUMNS": "300"})


@pytest.fixture
def theme_live(home: Path) -> Path:
    path = home / ".config" / "starship.toml"
    path.parent.mkdir(parents=True)
    path.write_text(f'[directory]\nhome = "{home}"\n')
    return path


def test_help(cli_runner: CliRunner) -> None:
    """Test that the group lists its commands."""
    result = invoke(cli_runner, ["--help"])
    assert result.exit_code == 0
    for command in ("gather", "install", "status", "modules"):
        assert command in result.output


def test_gather_nothing_found(cli_runner: CliRunner, snapshot_dir: Path) -> None:
    """Test gather on a system without configuration."""
    result = invoke(cli_runner, ["gather", str(snapshot_dir)])
    assert result.exit_code == 1
    assert "No configuration found on this system to gather" in result.output
    assert not snapshot_dir.exists()


def test_gather(cli_runner: CliRunner, theme_live: Path, snapshot_dir: Path) -> None:
    """Test gather command."""
    result = invoke(cli_runner, ["gather", str(snapshot_dir)])
    assert result.exit_code == 0
    assert "Gathering" in result.output
    assert "{{HOME}}" in (snapshot_dir / "PromptTheme" / "theme.toml").read_text()


def test_gather_default_destination(cli_runner: CliRunner, theme_live: Path, home: Path) -> None:
    """Test that gather defaults to the configured snapshot directory."""
    result = invoke(cli_runner, ["gather", "-m", "PromptTheme"])
    assert result.exit_code == 0
    assert (home / "HerFiles" / "PromptTheme" / "theme.toml").is_file()


def test_gather_unknown_module(cli_runner: CliRunner, snapshot_dir: Path) -> None:
    result = invoke(cli_runner, ["gather", str(snapshot_dir), "-m", "Terminal"])
    assert result.exit_code == 1
    assert "Unknown module(s): Terminal" in result.output


def test_install_missing_snapshot(cli_runner: CliRunner, snapshot_dir: Path) -> None:
    """Test install command with a missing snapshot directory."""
    result = invoke(cli_runner, ["install", str(snapshot_dir)])
    assert result.exit_code == 1
    assert "Run 'herfiles gather' first" in result.output


def test_install_declined(cli_runner: CliRunner, theme_live: Path, snapshot_dir: Path) -> None:
    """Test that answering no leaves the live file alone and is not an error."""
    theme = snapshot_dir / "PromptTheme" / "theme.toml"
    theme.parent.mkdir(parents=True)
    theme.write_text("add_newline = false\n")
    before = theme_live.read_text()

    # Whether the program prompt or the overwrite prompt comes first, "n" skips
    result = invoke(cli_runner, ["install", str(snapshot_dir)], input="n\nn\n")
    assert result.exit_code == 0
    assert theme_live.read_text() == before
    assert "Skipped" in result.output


def test_status(cli_runner: CliRunner, theme_live: Path, snapshot_dir: Path) -> None:
    """Test status command after a gather."""
    invoke(cli_runner, ["gather", str(snapshot_dir)])
    result = invoke(cli_runner, ["status", str(snapshot_dir)])
    assert result.exit_code == 0
    assert "identical" in result.output


def test_status_missing_snapshot(cli_runner: CliRunner, snapshot_dir: Path) -> None:
    result = invoke(cli_runner, ["status", str(snapshot_dir)])
    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_modules(cli_runner: CliRunner, theme_live: Path, snapshot_dir: Path) -> None:
    """Test that modules are listed with their detection state."""
    result = invoke(cli_runner, ["modules", str(snapshot_dir)])
    assert result.exit_code == 0
    assert "Shell Profile" in result.output
    assert "Prompt Theme" in result.output
    assert "Editor" in result.output


def test_invalid_config(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that configuration errors stop the command."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("package_manager:\n  command: [brew, install]\n")
    result = invoke(cli_runner, ["--config", str(config_file), "modules"])
    assert result.exit_code == 1
    assert "{id} placeholder" in result.output
