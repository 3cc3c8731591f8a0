"""Manifests joining gathered assets and fonts to their restore metadata."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import ParseError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


@dataclass
class ManifestEntry:
    """A file in a snapshot folder plus what is needed to restore it."""

    file_name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, str]:
        data = {"file_name": self.file_name}
        data.update(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManifestEntry":
        if not isinstance(data, dict) or not isinstance(data.get("file_name"), str):
            raise ValueError("manifest entries must be objects with a file_name")
        metadata = {k: str(v) for k, v in data.items() if k != "file_name"}
        return cls(file_name=data["file_name"], metadata=metadata)


def write_manifest(folder: Path, entries: List[ManifestEntry]) -> Path:
    """Write ``manifest.json`` into ``folder`` unless unchanged, and return its path."""
    path = folder / MANIFEST_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps([entry.to_dict() for entry in entries], indent=2) + "\n"
    if path.is_file() and path.read_text(encoding="utf-8") == content:
        return path
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote manifest %s with %d entries", path, len(entries))
    return path


def read_manifest(folder: Path) -> List[ManifestEntry]:
    """Read ``manifest.json`` from ``folder``.

    Returns an empty list if the folder has no manifest.

    Raises:
        ParseError: If the manifest is not a JSON list of entries.
    """
    path = folder / MANIFEST_NAME
    if not path.is_file():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ParseError(e.msg, path=path, line=e.lineno, column=e.colno) from e
    if not isinstance(data, list):
        raise ParseError("manifest must be a JSON list", path=path)
    try:
        return [ManifestEntry.from_dict(item) for item in data]
    except ValueError as e:
        raise ParseError(str(e), path=path) from e
