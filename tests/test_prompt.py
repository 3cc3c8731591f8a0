"""Test interactive prompts."""

from typing import Any, List

import pytest
from rich.console import Console

from herfiles.core.prompt import Prompter


def answering(monkeypatch: pytest.MonkeyPatch, console: Console, answers: List[str]) -> Prompter:
    """Create a prompter whose console reads from ``answers``."""
    queue = list(answers)
    monkeypatch.setattr(console, "input", lambda prompt="", **kwargs: queue.pop(0))
    return Prompter(console)


@pytest.mark.parametrize(
    "answer,default,expected",
    [
        ("", False, False),
        ("", True, True),
        ("y", False, True),
        ("YES", False, True),
        ("Yes", True, True),
        ("n", True, False),
        ("yep", True, False),
        ("maybe", False, False),
    ],
)
def test_confirm(
    monkeypatch: pytest.MonkeyPatch, console: Console, answer: str, default: bool, expected: bool
) -> None:
    """Test yes/no answers and defaults."""
    prompter = answering(monkeypatch, console, [answer])
    assert prompter.confirm("Overwrite?", default=default) is expected


def test_confirm_suffix_shows_default(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    """Test that the prompt suffix reflects the default."""
    prompts: List[str] = []

    def fake_input(prompt: str = "", **kwargs: Any) -> str:
        prompts.append(prompt)
        return ""

    monkeypatch.setattr(console, "input", fake_input)
    prompter = Prompter(console)
    prompter.confirm("Overwrite?", default=False)
    prompter.confirm("Install?", default=True)
    assert prompts == ["Overwrite? [y/N] ", "Install? [Y/n] "]


def test_choose(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    """Test numbered menu selection and fallback to the default."""
    prompter = answering(monkeypatch, console, ["2", "", "abc", "7"])
    options = ["Install", "Skip"]
    assert prompter.choose("Extensions?", options) == 1
    assert prompter.choose("Extensions?", options) == 0
    assert prompter.choose("Extensions?", options, default_index=1) == 1
    assert prompter.choose("Extensions?", options) == 0
