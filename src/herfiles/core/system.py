"""Wrappers around the external programs herfiles relies on.

These collaborators are the only places that spawn processes. Modules receive
them through :class:`herfiles.core.modules.base.ModuleContext`, so tests can
replace them with recording fakes.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from rich.console import Console

from .config import Config
from .environment import Environment
from .errors import ExternalToolError, UserDeclinedError
from .prompt import Prompter

logger = logging.getLogger(__name__)


def _run(args: Sequence[str], check: bool = True) -> subprocess.CompletedProcess:
    """Run a command and capture its output."""
    logger.debug("Running: %s", " ".join(args))
    try:
        return subprocess.run(list(args), capture_output=True, text=True, check=check)
    except FileNotFoundError as e:
        raise ExternalToolError(args[0]) from e
    except subprocess.CalledProcessError as e:
        output = (e.stderr or e.stdout or "").strip()
        raise ExternalToolError(" ".join(args), e.returncode, output) from e


class ProgramDetector:
    """Looks up programs on the PATH."""

    def is_installed(self, name: str) -> bool:
        return shutil.which(name) is not None


def is_elevated() -> bool:
    """Return True if the process runs with root privileges."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


# Forwarded to the elevated run, which must resolve the operator's home
PRESERVED_ENV = ("HOME", "XDG_CONFIG_HOME", "XDG_DATA_HOME")


def relaunch_elevated(argv: Optional[List[str]] = None) -> None:
    """Replace the current process with the same command run under sudo.

    The operator's home and XDG directories are passed through ``env`` so
    that the elevated run installs into the same home. This call does not
    return on success.
    """
    argv = list(sys.argv if argv is None else argv)
    forwarded = [f"{name}={os.environ[name]}" for name in PRESERVED_ENV if os.environ.get(name)]
    command = ["sudo", "env", *forwarded, sys.executable, *argv]
    logger.info("Relaunching with elevated privileges: %s", " ".join(command))
    os.execvp("sudo", command)


class PackageInstaller:
    """Installs programs through the configured package manager.

    The command template comes from ``package_manager.command`` in the
    configuration, with ``{id}`` replaced by the package identifier.
    """

    def __init__(
        self,
        config: Config,
        prompter: Optional[Prompter] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.config = config
        self.console = console or Console()
        self.prompter = prompter or Prompter(self.console)

    def _ensure_privileges(self) -> None:
        if not self.config.package_manager.get("requires_root", False) or is_elevated():
            return
        self.console.print("[yellow]The package manager needs administrator privileges.")
        if not self.prompter.confirm("Relaunch herfiles with sudo?", default=True):
            raise UserDeclinedError("Elevation declined")
        relaunch_elevated()

    def install(self, package_id: str, description: str) -> bool:
        """Install a package.

        Args:
            package_id: Identifier understood by the package manager.
            description: Human-readable program name for messages.

        Returns:
            bool: True if the package manager reported success.
        """
        self._ensure_privileges()

        template = self.config.package_manager.get("command", [])
        command = [part.replace("{id}", package_id) for part in template]
        self.console.print(f"[bold]Installing {description}...")
        with self.console.status(f"Running {' '.join(command)}"):
            try:
                _run(command)
            except ExternalToolError as e:
                logger.error("Failed to install %s: %s", description, e)
                self.console.print(f"[red]Failed to install {description}: {e}")
                return False

        self._refresh_path()
        self.console.print(f"[green]Installed {description}")
        return True

    def _refresh_path(self) -> None:
        """Add configured binary directories to PATH so new programs are found."""
        current = os.environ.get("PATH", "").split(os.pathsep)
        added = []
        for extra in self.config.package_manager.get("extra_paths", []):
            path = str(Path(extra).expanduser())
            if Path(path).is_dir() and path not in current:
                added.append(path)
        if added:
            os.environ["PATH"] = os.pathsep.join(added + current)
            logger.debug("Added to PATH: %s", added)


class EditorCli:
    """Drives the editor's command line interface."""

    def __init__(self, executable: str = "code") -> None:
        self.executable = executable

    def _command(self) -> str:
        # Resolved per call: a package installation may have changed PATH.
        return shutil.which(self.executable) or self.executable

    def install_extension(self, extension_id: str) -> int:
        """Install one extension and return the CLI's exit code."""
        result = _run([self._command(), "--install-extension", extension_id], check=False)
        if result.returncode != 0:
            logger.warning(
                "Installing extension %s exited with %d: %s",
                extension_id,
                result.returncode,
                (result.stderr or result.stdout).strip(),
            )
        return result.returncode

    def list_extensions(self) -> List[str]:
        """Return the identifiers of installed extensions."""
        result = _run([self._command(), "--list-extensions"])
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def open_at(self, path: Path, line: int = 1) -> None:
        """Open a file in the editor with the cursor on ``line``."""
        _run([self._command(), "--goto", f"{path}:{line}"])


class FontRegistry:
    """Lists and registers fonts through fontconfig."""

    def __init__(self, environment: Environment) -> None:
        self.environment = environment

    def list_installed(self) -> Dict[str, str]:
        """Map installed font names (``"<family> <style>"``) to their files."""
        result = _run(["fc-list", "--format", "%{family[0]}\t%{style[0]}\t%{file}\n"])
        fonts: Dict[str, str] = {}
        for line in result.stdout.splitlines():
            parts = line.split("\t")
            if len(parts) != 3:
                continue
            family, style, file_path = (part.strip() for part in parts)
            name = f"{family} {style}".strip()
            fonts.setdefault(name, file_path)
        return fonts

    def register(self, name: str, path: Path) -> None:
        """Make a font file available to applications.

        Raises:
            ExternalToolError: If the font cache could not be refreshed.
        """
        fonts_dir = self.environment.fonts_dir
        fonts_dir.mkdir(parents=True, exist_ok=True)
        destination = fonts_dir / Path(path).name
        if Path(path).resolve() != destination.resolve():
            shutil.copy2(path, destination)
        logger.info("Registered font %s at %s", name, destination)
        if shutil.which("fc-cache"):
            _run(["fc-cache", "-f", str(fonts_dir)])
        else:
            logger.warning("fc-cache not found; font cache not refreshed")
