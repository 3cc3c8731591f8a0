"""Run summaries and their rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from .modules.base import FileState, FileStatus, ModuleOutcome, ModuleState


class RunCategory(str, Enum):
    """Overall shape of a run's outcomes."""

    EMPTY = "empty"
    ALL_SUCCEEDED = "all_succeeded"
    PARTIAL = "partial"
    ALL_SKIPPED = "all_skipped"
    ALL_FAILED = "all_failed"


@dataclass
class RunSummary:
    """Outcome of a gather or install run.

    Attributes:
        action: ``"gather"`` or ``"install"``.
        outcomes: Module name to outcome, in the order modules ran.
        states: Module name to lifecycle state, including modules that never ran.
        error: Top-level error that stopped the run before any module ran.
        hints: Follow-up advice from modules that succeeded.
        issues: Module name to per-file problems that did not stop the module.
    """

    action: str
    outcomes: Dict[str, ModuleOutcome] = field(default_factory=dict)
    states: Dict[str, ModuleState] = field(default_factory=dict)
    error: Optional[str] = None
    hints: List[str] = field(default_factory=list)
    issues: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def category(self) -> RunCategory:
        values = set(self.outcomes.values())
        if not values:
            return RunCategory.EMPTY
        if values == {ModuleOutcome.SUCCEEDED}:
            return RunCategory.PARTIAL if self.issues else RunCategory.ALL_SUCCEEDED
        if values == {ModuleOutcome.SKIPPED}:
            return RunCategory.ALL_SKIPPED
        if values == {ModuleOutcome.FAILED}:
            return RunCategory.ALL_FAILED
        return RunCategory.PARTIAL

    @property
    def ok(self) -> bool:
        """True if the run had no top-level error and no failed module."""
        return self.error is None and ModuleOutcome.FAILED not in self.outcomes.values()


OUTCOME_STYLES = {
    ModuleOutcome.SUCCEEDED: "[green]✓ Succeeded[/green]",
    ModuleOutcome.FAILED: "[red]✗ Failed[/red]",
    ModuleOutcome.SKIPPED: "[yellow]- Skipped[/yellow]",
}

STATE_STYLES = {
    FileState.IDENTICAL: "[green]identical[/green]",
    FileState.DIFFERS: "[yellow]differs[/yellow]",
    FileState.NOT_INSTALLED: "[cyan]not installed[/cyan]",
    FileState.MISSING_FROM_SNAPSHOT: "[red]missing from snapshot[/red]",
}

HEADLINES = {
    RunCategory.ALL_SUCCEEDED: "[bold green]All modules completed successfully.",
    RunCategory.PARTIAL: "[bold yellow]Some modules did not complete cleanly.",
    RunCategory.ALL_SKIPPED: "[bold yellow]All modules were skipped.",
    RunCategory.ALL_FAILED: "[bold red]All modules failed.",
    RunCategory.EMPTY: "[bold yellow]No modules were run.",
}


def render_banner(console: Console, action: str, location: Path) -> None:
    """Print the banner shown at the start of a run."""
    title = "Gathering from this system" if action == "gather" else "Installing onto this system"
    console.print(
        Panel.fit(
            f"[bold]{title}[/bold]\nSnapshot: {location}",
            title=f"herfiles {__version__}",
            border_style="magenta",
        )
    )


def render_summary(console: Console, summary: RunSummary) -> None:
    """Print the per-module outcomes, a headline and post-run hints."""
    if summary.error:
        console.print(f"[red]Error: {summary.error}")
        return

    table = Table(title=f"{summary.action.capitalize()} Summary")
    table.add_column("Module", style="cyan")
    table.add_column("Result")
    for name, outcome in summary.outcomes.items():
        table.add_row(name, OUTCOME_STYLES[outcome])
    console.print(table)
    console.print(HEADLINES[summary.category])

    for name, issues in summary.issues.items():
        for issue in issues:
            console.print(f"[yellow]! {name}: {issue}")

    for hint in summary.hints:
        console.print(f"[blue]→ {hint}")


def render_status(console: Console, report: Dict[str, List[FileStatus]]) -> None:
    """Print a drift table for each module."""
    table = Table(title="Snapshot Status")
    table.add_column("Module", style="cyan")
    table.add_column("Snapshot File", style="magenta")
    table.add_column("System Path")
    table.add_column("State")
    for name, statuses in report.items():
        for status in statuses:
            table.add_row(
                name,
                status.snapshot_path.name,
                str(status.live_path),
                STATE_STYLES[status.state],
            )
    console.print(table)
