"""Session commands for termbbs.

Public API:
    Command -- Abstract base class
    CommandRegistry -- (phase, name) -> Command lookup
    build_default_registry -- the standard command set
"""

from termbbs.commands.base import Command
from termbbs.commands.registry import CommandRegistry, build_default_registry, parse

__all__ = ["Command", "CommandRegistry", "build_default_registry", "parse"]
