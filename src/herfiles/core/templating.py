"""Rewriting of absolute home paths to and from portable placeholders."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Tuple

from .environment import Environment

HOME_TOKEN = "{{HOME}}"
MANAGED_TOKEN = "{{HERFILES}}"


class PathStyle(str, Enum):
    """How restored paths are written back into content."""

    NATIVE = "native"
    FORWARD = "forward"


class PathTemplater:
    """Converts content between its live and templated forms.

    Both the native-separator and the forward-slash spelling of each root are
    searched independently. The managed directory lives under the home
    directory, so it is replaced first to keep its own token.

    Example:
        ```python
        templater = PathTemplater(Environment.resolve())
        portable = templater.to_portable('{"path": "/home/ada/notes"}')
        # '{"path": "{{HOME}}/notes"}'
        live = templater.from_portable(portable)
        ```
    """

    def __init__(self, environment: Environment) -> None:
        self.environment = environment
        self._roots: List[Tuple[Path, str]] = [
            (environment.managed_dir, MANAGED_TOKEN),
            (environment.home, HOME_TOKEN),
        ]

    def render_path(self, path: Path, style: PathStyle = PathStyle.NATIVE) -> str:
        """Spell a path with the requested separator style."""
        forward = str(path).replace("\\", "/")
        if style == PathStyle.FORWARD:
            return forward
        return forward.replace("/", self.environment.separator)

    def _spellings(self, path: Path) -> List[str]:
        native = self.render_path(path, PathStyle.NATIVE)
        forward = self.render_path(path, PathStyle.FORWARD)
        return [native] if native == forward else [native, forward]

    def contains_home_path(self, content: str) -> bool:
        """Return True if content mentions the home directory in either spelling."""
        return any(spelling in content for spelling in self._spellings(self.environment.home))

    def to_portable(self, content: str) -> str:
        """Replace absolute home and managed-directory paths with placeholders."""
        if not self.contains_home_path(content):
            return content
        for root, token in self._roots:
            for spelling in self._spellings(root):
                content = content.replace(spelling, token)
        return content

    def from_portable(self, content: str, style: PathStyle = PathStyle.NATIVE) -> str:
        """Replace placeholders with real paths in the requested style."""
        for root, token in self._roots:
            content = content.replace(token, self.render_path(root, style))
        return content
