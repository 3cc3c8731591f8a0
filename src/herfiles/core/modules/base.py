"""The contract every content module implements.

A module knows where one application keeps its configuration on the live
system and how that configuration is laid out inside its snapshot folder.
The orchestrators call :meth:`Module.gather` and :meth:`Module.install`
polymorphically and never look at module names.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from ..compare import FileComparator, content_hash
from ..config import Config
from ..environment import Environment
from ..errors import ExternalToolError, NotFoundError, UserDeclinedError
from ..prompt import Prompter
from ..system import EditorCli, FontRegistry, PackageInstaller, ProgramDetector
from ..templating import PathStyle, PathTemplater

logger = logging.getLogger(__name__)


class ModuleOutcome(str, Enum):
    """Result of one module invocation."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class ModuleState(str, Enum):
    """Lifecycle of a module invocation within a run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

    @classmethod
    def from_outcome(cls, outcome: ModuleOutcome) -> "ModuleState":
        return cls(outcome.value)


class FileAction(str, Enum):
    """What happened to a single live file during install."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class FileState(str, Enum):
    """Drift of a single snapshot file relative to the live system."""

    IDENTICAL = "identical"
    DIFFERS = "differs"
    NOT_INSTALLED = "not installed"
    MISSING_FROM_SNAPSHOT = "missing from snapshot"


@dataclass(frozen=True)
class ModuleDescriptor:
    """Display name and snapshot folder of a module."""

    name: str
    folder: str


@dataclass(frozen=True)
class FileStatus:
    """Drift report entry for one snapshot file."""

    snapshot_path: Path
    live_path: Path
    state: FileState


@dataclass
class ModuleContext:
    """Services shared by all modules during a run."""

    config: Config
    environment: Environment
    console: Console
    templater: PathTemplater
    comparator: FileComparator
    prompter: Prompter
    programs: ProgramDetector
    packages: PackageInstaller
    editor: EditorCli
    fonts: FontRegistry

    @classmethod
    def create(
        cls,
        config: Config,
        environment: Environment,
        console: Optional[Console] = None,
        prompter: Optional[Prompter] = None,
    ) -> "ModuleContext":
        """Build a context wired to the real external programs."""
        console = console or Console()
        prompter = prompter or Prompter(console)
        return cls(
            config=config,
            environment=environment,
            console=console,
            templater=PathTemplater(environment),
            comparator=FileComparator(console),
            prompter=prompter,
            programs=ProgramDetector(),
            packages=PackageInstaller(config, prompter, console),
            editor=EditorCli(config.get_module_config("Editor").get("program", "code")),
            fonts=FontRegistry(environment),
        )


class Module(ABC):
    """Base class for content modules.

    Subclasses set :attr:`descriptor` and implement gathering, installing and
    live-config detection. Helpers on this class implement the shared policy:
    gather never prompts, install checks for the required program first and
    confirms every overwrite of a differing live file with a "no" default.
    """

    descriptor: ModuleDescriptor

    def __init__(self, context: ModuleContext) -> None:
        self.context = context
        self.console = context.console
        self.issues: List[str] = []

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def folder(self) -> str:
        return self.descriptor.folder

    @property
    def settings(self) -> Dict[str, Any]:
        """This module's section of the configuration."""
        return self.context.config.get_module_config(self.folder)

    @abstractmethod
    def has_live_config(self) -> bool:
        """Return True if the live system has configuration to gather."""

    @abstractmethod
    def gather(self, destination: Path) -> ModuleOutcome:
        """Copy live configuration into ``destination`` (this module's folder)."""

    @abstractmethod
    def install(self, source: Path) -> ModuleOutcome:
        """Copy configuration from ``source`` (this module's folder) to the system."""

    @abstractmethod
    def status(self, source: Path) -> List[FileStatus]:
        """Report drift between ``source`` and the live system without writing."""

    def report_issue(self, message: str) -> None:
        """Record a per-file problem that did not stop the module.

        Issues are printed as they happen and repeated in the run summary.
        """
        self.issues.append(message)
        self.console.print(f"[yellow]{message}")

    def post_install_hint(self) -> Optional[str]:
        """Command or advice shown after a successful install."""
        return None

    def has_snapshot(self, source: Path) -> bool:
        """Return True if ``source`` exists and contains at least one entry."""
        return source.is_dir() and any(source.iterdir())

    def ensure_program(self) -> None:
        """Make sure the program this module configures is installed.

        Raises:
            UserDeclinedError: If the operator declines the installation.
            ExternalToolError: If the package manager fails.
        """
        program = self.settings.get("program")
        if not program or self.context.programs.is_installed(program):
            return

        description = self.settings.get("description", program)
        self.console.print(f"[yellow]{description} ('{program}') is not installed.")
        if not self.context.prompter.confirm(f"Install {description} now?", default=True):
            raise UserDeclinedError(f"Installation of {description} declined")

        package_id = self.settings.get("package_id", program)
        if not self.context.packages.install(package_id, description):
            raise ExternalToolError(f"install {package_id}")

    def write_snapshot_file(self, live_path: Path, snapshot_path: Path) -> bool:
        """Template a live file into the snapshot.

        Returns:
            bool: True if the snapshot file was written, False if it was
            already up to date.

        Raises:
            NotFoundError: If the live file does not exist.
        """
        if not live_path.is_file():
            raise NotFoundError(live_path)

        raw = live_path.read_bytes()
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            data = raw
        else:
            data = self.context.templater.to_portable(text).encode("utf-8")

        return self.write_snapshot_bytes(data, snapshot_path)

    def write_snapshot_bytes(self, data: bytes, snapshot_path: Path) -> bool:
        """Write ``data`` into the snapshot unless it is already identical."""
        if snapshot_path.is_file() and snapshot_path.read_bytes() == data:
            logger.debug("Snapshot file unchanged: %s", snapshot_path)
            return False
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        snapshot_path.write_bytes(data)
        logger.info("Gathered %s", snapshot_path)
        return True

    def render_snapshot_file(
        self, snapshot_path: Path, style: PathStyle = PathStyle.NATIVE
    ) -> bytes:
        """Return snapshot content with placeholders replaced by live paths."""
        raw = snapshot_path.read_bytes()
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw
        return self.context.templater.from_portable(text, style).encode("utf-8")

    def install_bytes(self, data: bytes, snapshot_path: Path, live_path: Path) -> FileAction:
        """Write rendered snapshot content to a live file, confirming overwrites.

        Raises:
            UserDeclinedError: If the operator declines overwriting a differing
                live file. The live file is left untouched.
        """
        result = self.context.comparator.compare(snapshot_path, live_path, source_content=data)
        if result.are_identical:
            self.console.print(f"[dim]Already up to date: {live_path}")
            return FileAction.UNCHANGED

        if not result.is_new_file:
            self.console.print(f"[yellow]{live_path} differs from the snapshot.")
            if not self.context.prompter.confirm(f"Overwrite {live_path}?", default=False):
                raise UserDeclinedError(f"Overwrite of {live_path} declined")

        live_path.parent.mkdir(parents=True, exist_ok=True)
        live_path.write_bytes(data)
        action = FileAction.CREATED if result.is_new_file else FileAction.UPDATED
        logger.info("%s %s", action.value.capitalize(), live_path)
        self.console.print(f"[green]Installed: {live_path}")
        return action

    def install_file(
        self, snapshot_path: Path, live_path: Path, style: PathStyle = PathStyle.NATIVE
    ) -> FileAction:
        """Render and install one templated snapshot file."""
        return self.install_bytes(
            self.render_snapshot_file(snapshot_path, style), snapshot_path, live_path
        )

    def install_copy(self, snapshot_path: Path, live_path: Path) -> FileAction:
        """Install a file verbatim (no templating), confirming overwrites."""
        result = self.context.comparator.compare(snapshot_path, live_path)
        if result.are_identical:
            return FileAction.UNCHANGED
        if not result.is_new_file:
            self.console.print(f"[yellow]{live_path} differs from the snapshot.")
            if not self.context.prompter.confirm(f"Overwrite {live_path}?", default=False):
                raise UserDeclinedError(f"Overwrite of {live_path} declined")
        live_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(snapshot_path, live_path)
        logger.info("Copied %s -> %s", snapshot_path, live_path)
        return FileAction.CREATED if result.is_new_file else FileAction.UPDATED

    def file_status(
        self, snapshot_path: Path, live_path: Path, templated: bool = True
    ) -> FileStatus:
        """Classify one snapshot file against its live counterpart."""
        if not snapshot_path.is_file():
            state = FileState.MISSING_FROM_SNAPSHOT
        elif not live_path.is_file():
            state = FileState.NOT_INSTALLED
        else:
            data = (
                self.render_snapshot_file(snapshot_path)
                if templated
                else snapshot_path.read_bytes()
            )
            same = content_hash(data) == content_hash(live_path.read_bytes())
            state = FileState.IDENTICAL if same else FileState.DIFFERS
        return FileStatus(snapshot_path=snapshot_path, live_path=live_path, state=state)


class SingleFileModule(Module):
    """A module that manages exactly one configuration file."""

    snapshot_name: str

    @abstractmethod
    def default_live_path(self) -> Path:
        """Where the application reads its configuration by default."""

    @property
    def live_path(self) -> Path:
        return self.context.config.get_module_path(self.folder) or self.default_live_path()

    def has_live_config(self) -> bool:
        return self.live_path.is_file()

    def gather(self, destination: Path) -> ModuleOutcome:
        snapshot_path = destination / self.snapshot_name
        try:
            written = self.write_snapshot_file(self.live_path, snapshot_path)
        except NotFoundError as e:
            logger.warning("%s: %s", self.name, e)
            self.console.print(f"[yellow]{self.name}: nothing to gather ({e})")
            return ModuleOutcome.FAILED
        except OSError as e:
            logger.error("%s: failed to gather %s: %s", self.name, self.live_path, e)
            self.console.print(f"[red]Error gathering {self.live_path}: {e}")
            return ModuleOutcome.FAILED

        if written:
            self.console.print(f"[green]Gathered: {self.live_path} -> {snapshot_path}")
        else:
            self.console.print(f"[dim]Unchanged: {snapshot_path}")
        return ModuleOutcome.SUCCEEDED

    def install(self, source: Path) -> ModuleOutcome:
        snapshot_path = source / self.snapshot_name
        if not snapshot_path.is_file():
            self.console.print(f"[yellow]{self.name}: {snapshot_path} not found in snapshot")
            return ModuleOutcome.FAILED

        try:
            self.ensure_program()
            self.install_file(snapshot_path, self.live_path)
        except UserDeclinedError as e:
            logger.info("%s skipped: %s", self.name, e)
            self.console.print(f"[yellow]Skipped {self.name}")
            return ModuleOutcome.SKIPPED
        except (ExternalToolError, OSError) as e:
            logger.error("%s: install failed: %s", self.name, e)
            self.console.print(f"[red]Error installing {self.name}: {e}")
            return ModuleOutcome.FAILED
        return ModuleOutcome.SUCCEEDED

    def status(self, source: Path) -> List[FileStatus]:
        return [self.file_status(source / self.snapshot_name, self.live_path)]
