"""Content modules managed by herfiles."""

from __future__ import annotations

from typing import List, Type

from .base import (
    Module,
    ModuleContext,
    ModuleDescriptor,
    ModuleOutcome,
    ModuleState,
)
from .editor import EditorModule
from .prompt_theme import PromptThemeModule
from .shell_profile import ShellProfileModule

# Registration order is the order modules run in.
MODULE_TYPES: List[Type[Module]] = [ShellProfileModule, PromptThemeModule, EditorModule]


def create_modules(context: ModuleContext) -> List[Module]:
    """Instantiate every registered module."""
    return [module_type(context) for module_type in MODULE_TYPES]


__all__ = [
    "MODULE_TYPES",
    "EditorModule",
    "Module",
    "ModuleContext",
    "ModuleDescriptor",
    "ModuleOutcome",
    "ModuleState",
    "PromptThemeModule",
    "ShellProfileModule",
    "create_modules",
]
