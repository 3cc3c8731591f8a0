"""Starship prompt theme module."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .base import ModuleDescriptor, SingleFileModule


class PromptThemeModule(SingleFileModule):
    """Manages the Starship prompt configuration."""

    descriptor = ModuleDescriptor(name="Prompt Theme", folder="PromptTheme")
    snapshot_name = "theme.toml"

    def default_live_path(self) -> Path:
        return self.context.environment.config_dir / "starship.toml"

    def post_install_hint(self) -> Optional[str]:
        return "Open a new terminal to see the updated prompt theme"
