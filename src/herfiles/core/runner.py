"""Shared machinery for running modules in registration order."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from .modules import Module, ModuleContext, ModuleOutcome, ModuleState, create_modules
from .report import RunSummary

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return re.sub(r"[\s_\-]", "", name).lower()


class ModuleRunner:
    """Base class for the gather, install and status managers.

    Attributes:
        context: Services handed to every module.
        modules: Registered modules, in the order they run.
        console: Rich console for output.
    """

    def __init__(self, context: ModuleContext, modules: Optional[List[Module]] = None) -> None:
        self.context = context
        self.console: Console = context.console
        self.modules = modules if modules is not None else create_modules(context)

    def select(self, names: Sequence[str]) -> List[Module]:
        """Return the modules matching ``names`` in registration order.

        Names match a module's display name or folder, ignoring case, spaces,
        hyphens and underscores.

        Raises:
            ValueError: If a name matches no module.
        """
        wanted = {_normalize(name): name for name in names}
        selected = []
        for module in self.modules:
            keys = {_normalize(module.name), _normalize(module.folder)}
            if keys & set(wanted):
                selected.append(module)
                for key in keys:
                    wanted.pop(key, None)
        if wanted:
            known = ", ".join(module.folder for module in self.modules)
            raise ValueError(f"Unknown module(s): {', '.join(wanted.values())} (known: {known})")
        return selected

    def run_modules(
        self,
        summary: RunSummary,
        modules: List[Module],
        root: Path,
        step: Callable[[Module, Path], ModuleOutcome],
    ) -> None:
        """Run ``step`` for each module, isolating failures per module."""
        for module in modules:
            summary.states[module.name] = ModuleState.NOT_STARTED

        for module in modules:
            summary.states[module.name] = ModuleState.RUNNING
            module.issues = []
            self.console.rule(f"[bold]{module.name}")
            try:
                outcome = step(module, root / module.folder)
            except Exception as e:
                logger.exception("%s %s failed", module.name, summary.action)
                self.console.print(f"[red]Error in {module.name}: {e}")
                outcome = ModuleOutcome.FAILED

            summary.outcomes[module.name] = outcome
            if module.issues:
                summary.issues[module.name] = list(module.issues)
            summary.states[module.name] = ModuleState.from_outcome(outcome)
            logger.info("%s %s: %s", module.name, summary.action, outcome.value)

    def fail(self, summary: RunSummary, message: str) -> RunSummary:
        """Record a top-level error on ``summary``."""
        logger.error(message)
        summary.error = message
        return summary
