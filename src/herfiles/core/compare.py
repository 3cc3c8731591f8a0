"""Content comparison between snapshot and live files."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from .errors import NotFoundError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def content_hash(data: bytes) -> str:
    """Return the SHA-256 hex digest of a byte string."""
    return hashlib.sha256(data).hexdigest()


def file_hash(path: Path) -> str:
    """Return the SHA-256 hex digest of a file's contents."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


@dataclass(frozen=True)
class FileInfo:
    """Facts about one side of a comparison."""

    path: Path
    size: int
    modified: datetime
    content_hash: str

    @classmethod
    def from_path(cls, path: Path, content: Optional[bytes] = None) -> "FileInfo":
        stat = path.stat()
        return cls(
            path=path,
            size=len(content) if content is not None else stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime),
            content_hash=content_hash(content) if content is not None else file_hash(path),
        )


@dataclass(frozen=True)
class FileComparisonResult:
    """Outcome of comparing a source file against a target file."""

    are_identical: bool
    is_new_file: bool
    source: FileInfo
    target: Optional[FileInfo]


class FileComparator:
    """Classifies two files as identical, differing or target-missing.

    Only the content hash decides equality; size and modification time are
    reported for the operator but never trusted.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def compare(
        self,
        source: Path,
        target: Path,
        source_content: Optional[bytes] = None,
    ) -> FileComparisonResult:
        """Compare ``source`` against ``target``.

        Args:
            source: File the content comes from.
            target: File that would be overwritten.
            source_content: Content to compare instead of the raw source bytes,
                for example a snapshot file after its paths were restored.

        Returns:
            FileComparisonResult: The comparison result.

        Raises:
            NotFoundError: If ``source`` does not exist.
        """
        source = Path(source)
        target = Path(target)
        if not source.is_file():
            raise NotFoundError(source)

        source_info = FileInfo.from_path(source, source_content)
        if not target.is_file():
            logger.debug("Target %s does not exist", target)
            return FileComparisonResult(
                are_identical=False, is_new_file=True, source=source_info, target=None
            )

        target_info = FileInfo.from_path(target)
        identical = source_info.content_hash == target_info.content_hash
        logger.debug(
            "Compared %s (%s) with %s (%s): identical=%s",
            source,
            source_info.content_hash[:12],
            target,
            target_info.content_hash[:12],
            identical,
        )

        if not identical:
            self.console.print(
                f"  [dim]Snapshot:[/dim] {source} "
                f"[dim](modified {source_info.modified:%Y-%m-%d %H:%M:%S})[/dim]"
            )
            self.console.print(
                f"  [dim]System:[/dim]   {target} "
                f"[dim](modified {target_info.modified:%Y-%m-%d %H:%M:%S})[/dim]"
            )

        return FileComparisonResult(
            are_identical=identical, is_new_file=False, source=source_info, target=target_info
        )
