"""PowerShell profile module."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .base import ModuleDescriptor, SingleFileModule


class ShellProfileModule(SingleFileModule):
    """Manages the PowerShell profile script."""

    descriptor = ModuleDescriptor(name="Shell Profile", folder="ShellProfile")
    snapshot_name = "profile.ps1"

    def default_live_path(self) -> Path:
        return (
            self.context.environment.config_dir
            / "powershell"
            / "Microsoft.PowerShell_profile.ps1"
        )

    def post_install_hint(self) -> Optional[str]:
        return "Reload your shell profile with: . $PROFILE"
