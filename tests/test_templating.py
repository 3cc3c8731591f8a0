"""Test path templating."""

from pathlib import Path

import pytest

from herfiles.core.environment import Environment
from herfiles.core.templating import HOME_TOKEN, MANAGED_TOKEN, PathStyle, PathTemplater


@pytest.fixture
def templater() -> PathTemplater:
    """Create a templater for a POSIX home directory."""
    home = Path("/home/ada")
    environment = Environment(
        home=home,
        managed_dir=home / ".herfiles",
        config_dir=home / ".config",
        data_dir=home / ".local" / "share",
        separator="/",
    )
    return PathTemplater(environment)


@pytest.fixture
def windows_templater() -> PathTemplater:
    """Create a templater whose native separator is a backslash."""
    home = Path("C:\\Users\\ada")
    environment = Environment(
        home=home,
        managed_dir=home / ".herfiles",
        config_dir=home / "AppData" / "Roaming",
        data_dir=home / "AppData" / "Local",
        separator="\\",
    )
    return PathTemplater(environment)


def test_home_path_replaced(templater: PathTemplater) -> None:
    """Test that the home directory becomes a placeholder."""
    content = 'source "/home/ada/scripts/aliases.ps1"'
    assert templater.to_portable(content) == f'source "{HOME_TOKEN}/scripts/aliases.ps1"'


def test_managed_dir_has_own_placeholder(templater: PathTemplater) -> None:
    """Test that the managed directory is not swallowed by the home placeholder."""
    content = "file:///home/ada/.herfiles/CustomAssets/custom.css and /home/ada/notes"
    assert templater.to_portable(content) == (
        f"file://{MANAGED_TOKEN}/CustomAssets/custom.css and {HOME_TOKEN}/notes"
    )


def test_content_without_home_unchanged(templater: PathTemplater) -> None:
    """Test that content without home paths passes through."""
    content = 'format = "$directory$character"\n'
    assert not templater.contains_home_path(content)
    assert templater.to_portable(content) == content


def test_to_portable_idempotent(templater: PathTemplater) -> None:
    """Test that templating twice gives the same result as once."""
    content = "/home/ada/a\n/home/ada/.herfiles/b\n"
    once = templater.to_portable(content)
    assert templater.to_portable(once) == once


def test_round_trip(templater: PathTemplater) -> None:
    """Test that restoring templated content gives back the original."""
    content = '{"css": "file:///home/ada/.herfiles/CustomAssets/a.css", "cwd": "/home/ada"}'
    assert templater.from_portable(templater.to_portable(content)) == content


def test_both_spellings_replaced(windows_templater: PathTemplater) -> None:
    """Test that native and forward-slash spellings are both recognized."""
    content = "C:\\Users\\ada\\Documents and C:/Users/ada/Pictures"
    assert windows_templater.to_portable(content) == (
        f"{HOME_TOKEN}\\Documents and {HOME_TOKEN}/Pictures"
    )


def test_restore_styles(windows_templater: PathTemplater) -> None:
    """Test that placeholders restore with the requested separator."""
    content = f"{MANAGED_TOKEN}/Fonts"
    assert windows_templater.from_portable(content) == "C:\\Users\\ada\\.herfiles/Fonts"
    forward = windows_templater.from_portable(content, PathStyle.FORWARD)
    assert forward == "C:/Users/ada/.herfiles/Fonts"


def test_literal_placeholder_in_content_is_expanded(templater: PathTemplater) -> None:
    """Test that a literal placeholder in live content is not escaped.

    Content that already contains the placeholder text comes back as a real
    path after a round trip.
    """
    content = "echo {{HOME}} is /home/ada"
    portable = templater.to_portable(content)
    assert portable == "echo {{HOME}} is {{HOME}}"
    assert templater.from_portable(portable) == "echo /home/ada is /home/ada"
