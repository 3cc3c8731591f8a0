"""Gather: copy live configuration into a snapshot directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .modules import ModuleOutcome
from .report import RunSummary, render_banner, render_summary
from .runner import ModuleRunner

logger = logging.getLogger(__name__)


class GatherManager(ModuleRunner):
    """Gathers configuration from the live system into a snapshot.

    Gather never prompts: the snapshot is expected to live under version
    control, so overwriting it is always safe.
    """

    def gather(self, destination: Path, modules: Optional[Sequence[str]] = None) -> RunSummary:
        """Gather configuration into ``destination``.

        Args:
            destination: Snapshot root directory.
            modules: Module names to gather. If None, every module with live
                configuration on this system is gathered.

        Returns:
            RunSummary: Per-module outcomes, or a top-level error if nothing
            could be gathered. No files are written in the error case.
        """
        summary = RunSummary(action="gather")
        destination = Path(destination).expanduser()
        render_banner(self.console, "gather", destination)

        if modules:
            try:
                selected = self.select(modules)
            except ValueError as e:
                self.fail(summary, str(e))
                render_summary(self.console, summary)
                return summary
        else:
            selected = [module for module in self.modules if module.has_live_config()]
            logger.debug("Detected modules: %s", [module.name for module in selected])
            if not selected:
                self.fail(summary, "No configuration found on this system to gather")
                render_summary(self.console, summary)
                return summary

        destination.mkdir(parents=True, exist_ok=True)
        self.run_modules(
            summary, selected, destination, lambda module, folder: module.gather(folder)
        )

        if ModuleOutcome.SUCCEEDED in summary.outcomes.values():
            summary.hints.append(f"Commit the snapshot in {destination} to keep a history")
        render_summary(self.console, summary)
        return summary
