"""Phase-partitioned command lookup.

Commands reachable before login and after login live in two separate
name maps. A command object may be registered in both phases (quit,
help) and under several aliases; all of them resolve to the same
instance.
"""

from __future__ import annotations

import logging

from termbbs.commands.base import Command
from termbbs.domain.models import Phase
from termbbs.errors import CommandNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)


def parse(line: str) -> tuple[str, list[str]]:
    """Split an input line into a command name and its arguments.

    Raises:
        InvalidInputError: If the line holds no words at all.
    """
    words = line.split()
    if not words:
        raise InvalidInputError("Unknown command. Type 'help' for a list of commands.")
    return words[0], words[1:]


class CommandRegistry:
    """Maps (phase, name) to a Command. Names are case-insensitive."""

    def __init__(self) -> None:
        self._maps: dict[Phase, dict[str, Command]] = {
            Phase.LOGGED_OFF: {},
            Phase.LOGGED_ON: {},
        }
        self._order: dict[Phase, list[Command]] = {
            Phase.LOGGED_OFF: [],
            Phase.LOGGED_ON: [],
        }

    def register(self, phase: Phase, command: Command) -> None:
        """Make ``command`` reachable under all its names in ``phase``.

        Raises:
            ValueError: If the phase accepts no commands, the command has
                no names, or a name is already taken in that phase.
        """
        if phase not in self._maps:
            raise ValueError(f"No commands can be registered for phase {phase.value}")
        if not command.names:
            raise ValueError(f"{command!r} has no names")
        table = self._maps[phase]
        keys = [n.lower() for n in command.names]
        for key in keys:
            if key in table:
                raise ValueError(f"Command name {key!r} already registered for {phase.value}")
        for key in keys:
            table[key] = command
        self._order[phase].append(command)
        logger.debug("Registered %r for %s", command, phase.value)

    def lookup(self, phase: Phase, name: str) -> Command:
        """Return the command registered as ``name`` in ``phase``.

        Raises:
            CommandNotFoundError: If no such command is reachable.
        """
        command = self._maps.get(phase, {}).get(name.lower())
        if command is None:
            raise CommandNotFoundError(name)
        return command

    def resolve(self, phase: Phase, line: str) -> tuple[Command, list[str]]:
        """Parse ``line`` and look its first word up in ``phase``."""
        name, args = parse(line)
        return self.lookup(phase, name), args

    def commands(self, phase: Phase) -> list[Command]:
        """Distinct commands reachable in ``phase``, in registration order."""
        return list(self._order.get(phase, []))

    def names(self, phase: Phase) -> list[str]:
        """Canonical names of the commands reachable in ``phase``."""
        return [c.name for c in self.commands(phase)]


def build_default_registry() -> CommandRegistry:
    """Wire the standard command set into a new registry."""
    from termbbs.commands.account import LoginCommand, RegisterCommand
    from termbbs.commands.control import HelpCommand, QuitCommand
    from termbbs.commands.messages import (
        ListMessagesCommand,
        PostMessageCommand,
        ReadMessageCommand,
    )

    registry = CommandRegistry()
    quit_cmd = QuitCommand()
    help_cmd = HelpCommand()

    registry.register(Phase.LOGGED_OFF, LoginCommand())
    registry.register(Phase.LOGGED_OFF, RegisterCommand())
    registry.register(Phase.LOGGED_OFF, quit_cmd)
    registry.register(Phase.LOGGED_OFF, help_cmd)

    registry.register(Phase.LOGGED_ON, ListMessagesCommand())
    registry.register(Phase.LOGGED_ON, PostMessageCommand())
    registry.register(Phase.LOGGED_ON, ReadMessageCommand())
    registry.register(Phase.LOGGED_ON, quit_cmd)
    registry.register(Phase.LOGGED_ON, help_cmd)
    return registry
