"""Test environment resolution."""

from pathlib import Path

import pytest

from herfiles.core.environment import Environment
from herfiles.core.errors import EnvironmentResolutionError


def test_resolve_defaults(tmp_path: Path) -> None:
    """Test resolution from HOME alone."""
    env = Environment.resolve(environ={"HOME": str(tmp_path)})
    assert env.home == tmp_path
    assert env.managed_dir == tmp_path / ".herfiles"
    assert env.config_dir == tmp_path / ".config"
    assert env.fonts_dir == tmp_path / ".local" / "share" / "fonts"


def test_resolve_xdg(tmp_path: Path) -> None:
    """Test that XDG base directories are honored."""
    env = Environment.resolve(
        environ={
            "HOME": str(tmp_path),
            "XDG_CONFIG_HOME": str(tmp_path / "cfg"),
            "XDG_DATA_HOME": str(tmp_path / "data"),
        }
    )
    assert env.config_dir == tmp_path / "cfg"
    assert env.fonts_dir == tmp_path / "data" / "fonts"
    # The managed directory always lives directly under home
    assert env.managed_dir == tmp_path / ".herfiles"


def test_explicit_home_wins(tmp_path: Path) -> None:
    """Test that an explicit home bypasses the environment."""
    env = Environment.resolve(environ={"HOME": "/elsewhere"}, home=tmp_path)
    assert env.home == tmp_path


def test_relative_home_rejected() -> None:
    """Test that a relative home directory is an error."""
    with pytest.raises(EnvironmentResolutionError):
        Environment.resolve(environ={"HOME": "relative/home"})


def test_environment_is_frozen(tmp_path: Path) -> None:
    """Test that a resolved environment cannot be changed."""
    env = Environment.resolve(environ={"HOME": str(tmp_path)})
    with pytest.raises(AttributeError):
        env.home = Path("/tmp")  # type: ignore[misc]
