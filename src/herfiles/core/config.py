"""Configuration management for herfiles."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

console = Console()

DEFAULT_CONFIG_FILE = "~/.herfiles/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "snapshot_dir": "~/HerFiles",
    "log_file": None,
    "package_manager": {
        "command": ["brew", "install", "{id}"],
        "requires_root": False,
        "extra_paths": ["/opt/homebrew/bin", "/home/linuxbrew/.linuxbrew/bin", "~/.local/bin"],
    },
    "modules": {
        "ShellProfile": {
            "program": "pwsh",
            "package_id": "powershell",
            "description": "PowerShell",
            "path": None,
        },
        "PromptTheme": {
            "program": "starship",
            "package_id": "starship",
            "description": "Starship prompt",
            "path": None,
        },
        "Editor": {
            "program": "code",
            "package_id": "visual-studio-code",
            "description": "Visual Studio Code",
            "path": None,
        },
    },
}

MODULE_KEYS = ("program", "package_id", "description", "path")


class Config:
    """Configuration class for herfiles."""

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """Initialize configuration."""
        self.config: Dict[str, Any] = {}
        self.snapshot_dir: Path = Path(DEFAULT_CONFIG["snapshot_dir"]).expanduser()
        self.log_file: Optional[str] = None
        self.package_manager: Dict[str, Any] = {}
        self.modules: Dict[str, Dict[str, Any]] = {}
        self.load_config(config_file)

    def load_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from file."""
        # Start with default configuration
        self._merge_config(copy.deepcopy(DEFAULT_CONFIG))

        if config_file is None:
            config_file = Path(DEFAULT_CONFIG_FILE).expanduser()
            if not config_file.exists():
                return

        try:
            import yaml

            with open(config_file, "r", encoding="utf-8") as f:
                user_config = yaml.safe_load(f)
            if user_config:
                self._merge_config(user_config)
        except Exception as e:
            console.print(f"[red]Error loading config file: {e}[/red]")

    def _merge_config(self, config: Dict[str, Any]) -> None:
        """Merge configuration with current configuration."""
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a dictionary")

        # Update the raw config
        self.config.update(config)

        if "snapshot_dir" in config:
            if not isinstance(config["snapshot_dir"], str):
                raise ValueError("snapshot_dir must be a string")
            self.snapshot_dir = Path(config["snapshot_dir"]).expanduser()

        if "log_file" in config:
            if config["log_file"] is not None and not isinstance(config["log_file"], str):
                raise ValueError("log_file must be a string")
            self.log_file = config["log_file"]

        if "package_manager" in config:
            package_manager = config["package_manager"]
            if not isinstance(package_manager, dict):
                raise ValueError("package_manager must be a dictionary")
            if "command" in package_manager:
                command = package_manager["command"]
                if not isinstance(command, list) or not all(isinstance(c, str) for c in command):
                    raise ValueError("package_manager command must be a list of strings")
            if "extra_paths" in package_manager and not isinstance(
                package_manager["extra_paths"], list
            ):
                raise ValueError("package_manager extra_paths must be a list")
            self.package_manager.update(package_manager)

        if "modules" in config:
            if not isinstance(config["modules"], dict):
                raise ValueError("modules must be a dictionary")
            for module, module_config in config["modules"].items():
                if not isinstance(module_config, dict):
                    raise ValueError(f"Module configuration for {module} must be a dictionary")
                unknown = set(module_config) - set(MODULE_KEYS)
                if unknown:
                    raise ValueError(
                        f"Unknown keys for module {module}: {', '.join(sorted(unknown))}"
                    )
                if module in self.modules:
                    self.modules[module].update(module_config)
                else:
                    self.modules[module] = dict(module_config)

    def validate(self) -> List[str]:
        """Validate configuration."""
        errors = []

        command = self.package_manager.get("command")
        if not isinstance(command, list) or not command:
            errors.append("package_manager command must be a non-empty list")
        elif not any("{id}" in part for part in command):
            errors.append("package_manager command must contain an {id} placeholder")

        if not isinstance(self.package_manager.get("requires_root", False), bool):
            errors.append("package_manager requires_root must be a boolean")

        for module, module_config in self.modules.items():
            for key in ("program", "package_id", "description"):
                value = module_config.get(key)
                if not isinstance(value, str) or not value:
                    errors.append(f"module {module} {key} must be a non-empty string")
            path = module_config.get("path")
            if path is not None and not isinstance(path, str):
                errors.append(f"module {module} path must be a string")

        return errors

    def get_module_config(self, module: str) -> Dict[str, Any]:
        """Get configuration for a specific module."""
        return self.modules.get(module, {})

    def get_module_path(self, module: str) -> Optional[Path]:
        """Get the live path override for a module, if configured."""
        path = self.get_module_config(module).get("path")
        return Path(path).expanduser() if path else None

    def load_from_dict(self, config_data: Dict[str, Any]) -> None:
        """Load configuration from a dictionary.

        Args:
            config_data: Dictionary containing configuration data.

        Example:
            ```python
            config = Config()
            config.load_from_dict({
                "snapshot_dir": "~/dotfiles/HerFiles",
                "package_manager": {"command": ["apt-get", "install", "-y", "{id}"]},
            })
            ```
        """
        self._merge_config(config_data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: The configuration key to get.
            default: The default value to return if the key is not found.

        Returns:
            The configuration value, or the default if not found.
        """
        return self.config.get(key, default)
