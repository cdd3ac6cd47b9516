"""Abstract base class for session commands.

A command is a stateless capability registered under one or more names.
The session resolves the first word of each input line to a command and
calls :meth:`Command.execute` with itself and the remaining words.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termbbs.server.session import Session

logger = logging.getLogger(__name__)


class Command(ABC):
    """Abstract interface for a named session operation.

    Subclasses set ``names`` (the first entry is the canonical name,
    the rest are aliases) and ``help``, and implement :meth:`execute`.

    Example::

        class Ping(Command):
            names = ("ping",)
            help = "Answer with pong"

            async def execute(self, session, args):
                await session.writeln("pong")
    """

    names: tuple[str, ...] = ()
    help: str = ""

    @property
    def name(self) -> str:
        return self.names[0]

    @abstractmethod
    async def execute(self, session: Session, args: list[str]) -> None:
        """Run the command for ``session``.

        Args:
            session: The calling session. Commands do all their I/O
                through it and reach shared state via ``session.state``.
            args: Words following the command name; empty if none.

        Raises:
            CommandError: For recoverable failures, reported to the
                client as one line.
            SessionIOError: If the connection fails; ends the session.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(names={self.names!r})"
