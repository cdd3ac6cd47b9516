"""Post-login commands for the message board."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from termbbs.commands.base import Command
from termbbs.errors import AuthenticationError, InvalidInputError
from termbbs.utils import ansi

if TYPE_CHECKING:
    from termbbs.server.session import Session

logger = logging.getLogger(__name__)

BODY_TERMINATOR = "."


class ListMessagesCommand(Command):
    names = ("list", "ls")
    help = "List all messages (id, author, subject)"

    async def execute(self, session: Session, args: list[str]) -> None:
        messages = await session.state.list_messages()
        if not messages:
            await session.writeln("No messages.")
            return
        for message in messages:
            await session.writeln(f"{message.id} {message.username} {message.subject}")


class PostMessageCommand(Command):
    names = ("post", "new")
    help = f"Write a new message; end the body with a line containing only '{BODY_TERMINATOR}'"

    async def execute(self, session: Session, args: list[str]) -> None:
        if not session.status.is_logged_on or session.status.username is None:
            raise AuthenticationError("You must be logged in to post.")

        subject = await session.prompt("Subject: ")
        if not subject:
            raise InvalidInputError("A message needs a subject.")
        await session.writeln(f"Enter your message. End with a line containing only '{BODY_TERMINATOR}'.")
        lines = await session.read_block(BODY_TERMINATOR)

        message = await session.state.add_message(
            session.status.username, subject, "\n".join(lines)
        )
        await session.writeln(f"Message {message.id} posted.", ansi.SUCCESS)


class ReadMessageCommand(Command):
    names = ("read", "r")
    help = "Show a message: read <id>"

    async def execute(self, session: Session, args: list[str]) -> None:
        if len(args) != 1:
            raise InvalidInputError("Usage: read <id>")
        try:
            message_id = int(args[0])
        except ValueError:
            raise InvalidInputError(f"Not a message id: {args[0]}") from None

        message = await session.state.get_message(message_id)
        await session.writeln(f"Subject: {message.subject}", ansi.HEADING)
        await session.writeln(f"From: {message.username}")
        await session.writeln("")
        for line in message.body.split("\n"):
            await session.writeln(line)
