"""Resolution of the filesystem roots herfiles works with.

Every component receives a single :class:`Environment` at construction time
instead of reading the process environment on its own. The environment is
resolved once per run and is read-only afterwards.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .errors import EnvironmentResolutionError

logger = logging.getLogger(__name__)

MANAGED_DIR_NAME = ".herfiles"


@dataclass(frozen=True)
class Environment:
    """Resolved filesystem roots for a run.

    Attributes:
        home: The user's home directory.
        managed_dir: Directory herfiles owns outright (assets, fonts, config).
        config_dir: Base directory for application configuration files.
        data_dir: Base directory for user data such as fonts.
        separator: Native path separator used when rendering paths.
    """

    home: Path
    managed_dir: Path
    config_dir: Path
    data_dir: Path
    separator: str = field(default=os.sep)

    @classmethod
    def resolve(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        home: Optional[Path] = None,
    ) -> "Environment":
        """Resolve the environment from process variables.

        Args:
            environ: Mapping to read variables from (defaults to ``os.environ``).
            home: Explicit home directory, bypassing lookup.

        Returns:
            Environment: The resolved environment.

        Raises:
            EnvironmentResolutionError: If the home directory cannot be determined
                or is not an absolute path.
        """
        env = os.environ if environ is None else environ

        if home is None:
            home_value = env.get("HOME")
            if home_value:
                home = Path(home_value)
            else:
                try:
                    home = Path.home()
                except (KeyError, RuntimeError) as e:
                    raise EnvironmentResolutionError(
                        f"Unable to resolve the home directory: {e}"
                    ) from e

        home = Path(home)
        if not home.is_absolute():
            raise EnvironmentResolutionError(f"Home directory '{home}' is not an absolute path")

        config_home = env.get("XDG_CONFIG_HOME")
        data_home = env.get("XDG_DATA_HOME")

        resolved = cls(
            home=home,
            managed_dir=home / MANAGED_DIR_NAME,
            config_dir=Path(config_home) if config_home else home / ".config",
            data_dir=Path(data_home) if data_home else home / ".local" / "share",
        )
        logger.debug("Resolved environment: %s", resolved)
        return resolved

    @property
    def fonts_dir(self) -> Path:
        """Directory where user fonts are registered."""
        return self.data_dir / "fonts"
