"""Status: report drift between a snapshot and the live system."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import NotFoundError
from .modules.base import FileStatus
from .report import render_status
from .runner import ModuleRunner

logger = logging.getLogger(__name__)


class StatusManager(ModuleRunner):
    """Compares snapshot files with their live counterparts without writing."""

    def status(
        self, source: Path, modules: Optional[Sequence[str]] = None
    ) -> Dict[str, List[FileStatus]]:
        """Return the drift of each module's snapshot files.

        Raises:
            NotFoundError: If ``source`` does not exist.
            ValueError: If a requested module name is unknown.
        """
        source = Path(source).expanduser()
        if not source.is_dir():
            raise NotFoundError(source, f"Snapshot directory {source} does not exist")

        selected = self.select(modules) if modules else self.modules
        report: Dict[str, List[FileStatus]] = {}
        for module in selected:
            folder = source / module.folder
            if not module.has_snapshot(folder):
                logger.debug("No snapshot for %s", module.name)
                continue
            report[module.name] = module.status(folder)

        if report:
            render_status(self.console, report)
        else:
            self.console.print(f"[yellow]No module snapshots found in {source}")
        return report
