"""Test file comparison."""

from pathlib import Path

import pytest
from rich.console import Console

from herfiles.core.compare import FileComparator, content_hash, file_hash
from herfiles.core.errors import NotFoundError


@pytest.fixture
def comparator(console: Console) -> FileComparator:
    return FileComparator(console)


def test_hashes_agree(tmp_path: Path) -> None:
    """Test that file and byte hashes agree."""
    path = tmp_path / "a.txt"
    path.write_bytes(b"hello\r\n")
    assert file_hash(path) == content_hash(b"hello\r\n")


def test_identical(comparator: FileComparator, tmp_path: Path) -> None:
    """Test comparing two files with the same content."""
    source = tmp_path / "source.toml"
    target = tmp_path / "target.toml"
    source.write_text("add_newline = false\n")
    target.write_text("add_newline = false\n")

    result = comparator.compare(source, target)
    assert result.are_identical
    assert not result.is_new_file
    assert result.target is not None


def test_same_file(comparator: FileComparator, tmp_path: Path) -> None:
    """Test comparing a file with itself."""
    path = tmp_path / "profile.ps1"
    path.write_text("Set-Alias ll ls\n")
    assert comparator.compare(path, path).are_identical


def test_missing_target(comparator: FileComparator, tmp_path: Path) -> None:
    """Test that a missing target is reported as a new file."""
    source = tmp_path / "source.toml"
    source.write_text("x")

    result = comparator.compare(source, tmp_path / "missing.toml")
    assert result.is_new_file
    assert not result.are_identical
    assert result.target is None


def test_missing_source(comparator: FileComparator, tmp_path: Path) -> None:
    """Test that a missing source raises."""
    with pytest.raises(NotFoundError):
        comparator.compare(tmp_path / "missing.toml", tmp_path / "target.toml")


def test_differs_shows_timestamps(
    comparator: FileComparator, console: Console, tmp_path: Path
) -> None:
    """Test that differing files print both modification times."""
    source = tmp_path / "source.toml"
    target = tmp_path / "target.toml"
    source.write_text("a")
    target.write_text("b")

    result = comparator.compare(source, target)
    assert not result.are_identical
    output = console.export_text()
    assert "Snapshot:" in output
    assert "System:" in output


def test_source_content_override(comparator: FileComparator, tmp_path: Path) -> None:
    """Test that supplied content is compared instead of the source bytes."""
    source = tmp_path / "settings.json"
    target = tmp_path / "live.json"
    source.write_text('{"dir": "{{HOME}}"}')
    target.write_text('{"dir": "/home/ada"}')

    result = comparator.compare(source, target, source_content=b'{"dir": "/home/ada"}')
    assert result.are_identical
    assert result.source.size == len(b'{"dir": "/home/ada"}')
