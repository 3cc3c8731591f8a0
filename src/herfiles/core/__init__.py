"""Core functionality for herfiles."""

from .config import Config
from .environment import Environment
from .gather import GatherManager
from .install import InstallManager
from .report import RunSummary
from .status import StatusManager

__all__ = [
    "Config",
    "Environment",
    "GatherManager",
    "InstallManager",
    "RunSummary",
    "StatusManager",
]
