"""Install: copy configuration from a snapshot back onto the live system."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .modules import Module, ModuleOutcome
from .report import RunSummary, render_banner, render_summary
from .runner import ModuleRunner

logger = logging.getLogger(__name__)


class InstallManager(ModuleRunner):
    """Installs configuration from a snapshot onto the live system."""

    def populated_modules(self, source: Path) -> List[Module]:
        """Modules whose snapshot folder under ``source`` has content."""
        return [module for module in self.modules if module.has_snapshot(source / module.folder)]

    def install(self, source: Path, modules: Optional[Sequence[str]] = None) -> RunSummary:
        """Install configuration from ``source``.

        Args:
            source: Snapshot root directory.
            modules: Module names to install. If None, every module with a
                populated snapshot folder is installed. If given, the list is
                narrowed to modules with a populated snapshot folder.

        Returns:
            RunSummary: Per-module outcomes, or a top-level error if the
            snapshot is missing or holds nothing to install.
        """
        summary = RunSummary(action="install")
        source = Path(source).expanduser()
        render_banner(self.console, "install", source)

        if not source.is_dir():
            self.fail(
                summary,
                f"Snapshot directory {source} does not exist. Run 'herfiles gather' first.",
            )
            render_summary(self.console, summary)
            return summary

        populated = self.populated_modules(source)
        if modules:
            try:
                requested = self.select(modules)
            except ValueError as e:
                self.fail(summary, str(e))
                render_summary(self.console, summary)
                return summary
            selected = [module for module in requested if module in populated]
            for module in requested:
                if module not in populated:
                    self.console.print(f"[yellow]No snapshot for {module.name} in {source}")
            if not selected:
                self.fail(summary, f"None of the requested modules have a snapshot in {source}")
                render_summary(self.console, summary)
                return summary
        else:
            selected = populated
            if not selected:
                self.fail(summary, f"No module snapshots found in {source}")
                render_summary(self.console, summary)
                return summary

        logger.debug("Installing modules: %s", [module.name for module in selected])
        self.run_modules(summary, selected, source, lambda module, folder: module.install(folder))

        for module in selected:
            if summary.outcomes.get(module.name) == ModuleOutcome.SUCCEEDED:
                hint = module.post_install_hint()
                if hint:
                    summary.hints.append(hint)

        render_summary(self.console, summary)
        return summary
