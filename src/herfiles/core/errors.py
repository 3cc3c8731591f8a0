"""Exceptions raised by herfiles."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class HerfilesError(Exception):
    """Base class for all herfiles errors."""


class EnvironmentResolutionError(HerfilesError):
    """The home or managed directory could not be resolved."""


class NotFoundError(HerfilesError):
    """An expected file or directory does not exist."""

    def __init__(self, path: Path, message: Optional[str] = None) -> None:
        self.path = Path(path)
        super().__init__(message or f"{self.path} does not exist")


class ParseError(HerfilesError):
    """A settings file or manifest could not be parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.path = path
        self.line = line
        self.column = column
        location = ""
        if path is not None:
            location = f"{path}"
            if line is not None:
                location += f":{line}"
                if column is not None:
                    location += f":{column}"
            location += ": "
        super().__init__(f"{location}{message}")


class UserDeclinedError(HerfilesError):
    """The operator declined an overwrite or a program installation."""


class ExternalToolError(HerfilesError):
    """An external command exited with a non-zero status or is unavailable."""

    def __init__(self, command: str, returncode: Optional[int] = None, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"Command '{command}' could not be run"
        else:
            message = f"Command '{command}' failed with exit code {returncode}"
        if output:
            message += f": {output}"
        super().__init__(message)
