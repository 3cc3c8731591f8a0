"""Command line interface for herfiles."""

from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from .core.config import Config
from .core.environment import Environment
from .core.errors import HerfilesError
from .core.gather import GatherManager
from .core.install import InstallManager
from .core.logging import setup_logging
from .core.modules import ModuleContext, create_modules
from .core.report import RunSummary
from .core.status import StatusManager

console = Console()

module_option = click.option(
    "--module",
    "-m",
    "modules",
    multiple=True,
    help="Module to include (can be given several times, e.g. -m Editor -m ShellProfile)",
)


def _snapshot_path(context: ModuleContext, path: Optional[Path]) -> Path:
    return path if path is not None else context.config.snapshot_dir


def _finish(summary: RunSummary) -> None:
    """Turn a run summary into the process exit status."""
    if summary.error:
        raise click.Abort()
    if not summary.ok:
        raise click.exceptions.Exit(1)


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (defaults to ~/.herfiles/config.yaml)",
)
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.option("--log-file", help="Also write logs to this file")
@click.pass_context
def cli(
    ctx: click.Context, config_file: Optional[Path], debug: bool, log_file: Optional[str]
) -> None:
    """Personal dotfiles manager.

    herfiles copies configuration between this system and a portable snapshot
    directory that you keep under version control. Absolute home directory
    paths are replaced by placeholders in the snapshot and restored on install.

    Main commands:

      gather    Copy configuration from this system into the snapshot
      install   Copy configuration from the snapshot onto this system
      status    Show which snapshot files differ from this system
      modules   List the modules herfiles manages

    Run 'herfiles COMMAND --help' for more information on a specific command.
    """
    config = Config(config_file)
    setup_logging(debug=debug, log_file=log_file or config.log_file)

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Configuration error: {error}")
        raise click.Abort()

    try:
        environment = Environment.resolve()
    except HerfilesError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()

    ctx.obj = ModuleContext.create(config, environment, console=console)


@cli.command()
@click.argument(
    "destination",
    required=False,
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
)
@module_option
@click.pass_obj
def gather(context: ModuleContext, destination: Optional[Path], modules: Tuple[str, ...]) -> None:
    """Copy configuration from this system into a snapshot.

    DESTINATION is the snapshot directory (defaults to snapshot_dir from the
    configuration, ~/HerFiles).

    Without --module, every module whose configuration exists on this system
    is gathered. Gather never asks before overwriting snapshot files.

    Examples:

      # Gather everything that exists on this system
      herfiles gather

      # Gather only the editor into a repository checkout
      herfiles gather ~/source/dotfiles/HerFiles -m Editor
    """
    manager = GatherManager(context)
    summary = manager.gather(_snapshot_path(context, destination), list(modules) or None)
    _finish(summary)


@cli.command()
@click.argument(
    "source",
    required=False,
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
)
@module_option
@click.pass_obj
def install(context: ModuleContext, source: Optional[Path], modules: Tuple[str, ...]) -> None:
    """Copy configuration from a snapshot onto this system.

    SOURCE is the snapshot directory (defaults to snapshot_dir from the
    configuration, ~/HerFiles).

    Files that already match the snapshot are left alone. Existing files that
    differ are only overwritten after you confirm. Missing programs can be
    installed through the configured package manager.

    Examples:

      # Install every module found in the snapshot
      herfiles install

      # Install only the shell profile and prompt theme
      herfiles install -m ShellProfile -m PromptTheme
    """
    manager = InstallManager(context)
    summary = manager.install(_snapshot_path(context, source), list(modules) or None)
    _finish(summary)


@cli.command()
@click.argument(
    "source",
    required=False,
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
)
@module_option
@click.pass_obj
def status(context: ModuleContext, source: Optional[Path], modules: Tuple[str, ...]) -> None:
    """Show how a snapshot differs from this system.

    Nothing is written. Each snapshot file is reported as identical, differs,
    not installed, or missing from snapshot.
    """
    manager = StatusManager(context)
    try:
        manager.status(_snapshot_path(context, source), list(modules) or None)
    except (HerfilesError, ValueError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()


@cli.command("modules")
@click.argument(
    "source",
    required=False,
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
)
@click.pass_obj
def list_modules(context: ModuleContext, source: Optional[Path]) -> None:
    """List modules and whether they are present on this system and in a snapshot."""
    snapshot = _snapshot_path(context, source)

    table = Table(title="Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Folder", style="magenta")
    table.add_column("On This System")
    table.add_column(f"In {snapshot}")

    for module in create_modules(context):
        live = "[green]yes" if module.has_live_config() else "[dim]no"
        saved = "[green]yes" if module.has_snapshot(snapshot / module.folder) else "[dim]no"
        table.add_row(module.name, module.folder, live, saved)

    console.print(table)


def main() -> None:
    """Entry point for the herfiles CLI."""
    cli()


if __name__ == "__main__":
    main()
