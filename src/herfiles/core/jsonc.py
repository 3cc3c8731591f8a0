"""Reading of JSON with comments, as used by editor settings files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional, Tuple

import json5

from .errors import ParseError

# json5 reports positions as "<name>:<line> Unexpected <thing> at column <col>"
ERROR_POSITION = re.compile(r":(\d+) (.*) at column (\d+)")


def _error_position(error: ValueError) -> Tuple[str, Optional[int], Optional[int]]:
    lineno = getattr(error, "lineno", None)
    colno = getattr(error, "colno", None)
    message = getattr(error, "msg", None) or str(error)
    if lineno is not None:
        return message, lineno, colno
    match = ERROR_POSITION.search(str(error))
    if match:
        return match.group(2), int(match.group(1)), int(match.group(3))
    return message, None, None


def loads(text: str, path: Optional[Path] = None) -> Any:
    """Parse JSON text that may contain comments and trailing commas.

    Args:
        text: The JSON-with-comments document.
        path: Optional source path used in error messages.

    Returns:
        The parsed document. A blank document parses as an empty object.

    Raises:
        ParseError: If the document is not valid JSON5.
    """
    if not text.strip():
        return {}
    try:
        return json5.loads(text)
    except ValueError as e:
        message, line, column = _error_position(e)
        raise ParseError(message, path=path, line=line, column=column) from e


def load(path: Path) -> Any:
    """Read and parse a JSON-with-comments file."""
    return loads(Path(path).read_text(encoding="utf-8"), path=path)
