"""Commands reachable in every phase: quit and help."""

from __future__ import annotations

from typing import TYPE_CHECKING

from termbbs.commands.base import Command
from termbbs.domain.models import SessionStatus
from termbbs.utils import ansi

if TYPE_CHECKING:
    from termbbs.server.session import Session


class QuitCommand(Command):
    names = ("quit", "exit", "disconnect")
    help = "Disconnect from the board"

    async def execute(self, session: Session, args: list[str]) -> None:
        await session.writeln("Goodbye!")
        session.transition(SessionStatus.disconnected())


class HelpCommand(Command):
    names = ("help", "?")
    help = "Show the commands available right now"

    async def execute(self, session: Session, args: list[str]) -> None:
        commands = session.registry.commands(session.status.phase)
        width = max((len(", ".join(c.names)) for c in commands), default=0)
        await session.writeln("Commands:", ansi.HEADING)
        for command in commands:
            await session.writeln(f"  {', '.join(command.names):<{width}}  {command.help}")
