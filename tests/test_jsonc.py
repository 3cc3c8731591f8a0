"""Test parsing of JSON with comments."""

from pathlib import Path

import pytest

from herfiles.core import jsonc
from herfiles.core.errors import ParseError


def test_line_comment() -> None:
    """Test that a line comment after a value is ignored."""
    assert jsonc.loads('{"a": 1 // comment\n}') == {"a": 1}


def test_block_comment() -> None:
    """Test that block comments, including multi-line ones, are ignored."""
    text = '{\n  /* first\n     second */\n  "a": /* inline */ true\n}'
    assert jsonc.loads(text) == {"a": True}


def test_comment_markers_inside_strings() -> None:
    """Test that comment markers inside strings are kept."""
    text = '{"url": "https://example.com/*path*/", "glob": "**/node_modules"}'
    assert jsonc.loads(text) == {
        "url": "https://example.com/*path*/",
        "glob": "**/node_modules",
    }


def test_escaped_quote_inside_string() -> None:
    """Test that escaped quotes do not end the string early."""
    text = '{"cmd": "echo \\"// not a comment\\""}'
    assert jsonc.loads(text) == {"cmd": 'echo "// not a comment"'}


def test_trailing_commas() -> None:
    """Test that trailing commas in objects and arrays are accepted."""
    text = '{\n  "a": [1, 2,],\n  "b": {"c": 3,},\n}'
    assert jsonc.loads(text) == {"a": [1, 2], "b": {"c": 3}}


def test_comma_inside_string_kept() -> None:
    """Test that ',}' inside a string is not treated as a trailing comma."""
    assert jsonc.loads('{"a": ",}"}') == {"a": ",}"}


def test_empty_document() -> None:
    """Test that a blank document parses as an empty object."""
    assert jsonc.loads("") == {}
    assert jsonc.loads("  \n") == {}


def test_trailing_comma_after_comment() -> None:
    assert jsonc.loads('{"a": 1 // c\n,}') == {"a": 1}


def test_error_line_points_at_original() -> None:
    """Test that error positions survive comment removal."""
    text = '{\n/* one\ntwo */\n"a": 1,\n"b": }'
    with pytest.raises(ParseError) as exc_info:
        jsonc.loads(text, path=Path("settings.json"))
    assert exc_info.value.line == 5
    assert str(exc_info.value).startswith("settings.json:5:")


def test_load_file(tmp_path: Path) -> None:
    """Test loading a file from disk."""
    path = tmp_path / "settings.json"
    path.write_text('{\n  // editor\n  "editor.fontSize": 14,\n}\n', encoding="utf-8")
    assert jsonc.load(path) == {"editor.fontSize": 14}
