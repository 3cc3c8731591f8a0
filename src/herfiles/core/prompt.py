"""Interactive confirmation prompts."""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from rich.console import Console

logger = logging.getLogger(__name__)

AFFIRMATIVE = re.compile(r"y(es)?", re.IGNORECASE)


class Prompter:
    """Asks the operator yes/no and multiple-choice questions.

    Empty input always selects the default. Overwrites of live files are asked
    with ``default=False`` so that pressing Enter never destroys anything.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        Args:
            question: The question to show.
            default: Answer used when the operator just presses Enter.

        Returns:
            bool: True only for an empty answer with a True default, or for
            ``y``/``yes`` in any case.
        """
        suffix = "[Y/n]" if default else "[y/N]"
        answer = self.console.input(f"{question} {suffix} ", markup=False).strip()
        if not answer:
            result = default
        else:
            result = AFFIRMATIVE.fullmatch(answer) is not None
        logger.debug("Confirm %r -> %s", question, result)
        return result

    def choose(self, question: str, options: Sequence[str], default_index: int = 0) -> int:
        """Present a numbered menu and return the chosen index.

        Non-numeric and out-of-range answers fall back to ``default_index``.
        """
        self.console.print(question)
        for number, option in enumerate(options, 1):
            marker = " [dim](default)[/dim]" if number - 1 == default_index else ""
            self.console.print(f"  {number}. {option}{marker}")

        answer = self.console.input(f"Select [1-{len(options)}]: ", markup=False).strip()
        try:
            index = int(answer) - 1
        except ValueError:
            index = default_index
        if not 0 <= index < len(options):
            index = default_index
        logger.debug("Choice %r -> %d", question, index)
        return index
