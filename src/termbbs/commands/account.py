"""Pre-login commands: login and register."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING

from termbbs.commands.base import Command
from termbbs.domain.models import SessionStatus
from termbbs.errors import AuthenticationError, InvalidInputError
from termbbs.utils import ansi

if TYPE_CHECKING:
    from termbbs.server.session import Session

logger = logging.getLogger(__name__)

# Letters, digits, underscores and hyphens, 3-20 chars
USERNAME_RE = re.compile(r"^[A-Za-z0-9_-]{3,20}$")


def valid_username(name: str) -> bool:
    return bool(USERNAME_RE.match(name))


class LoginCommand(Command):
    """Prompt for credentials until they check out or attempts run out.

    Failures are counted on the session, not per invocation, so typing
    ``login`` again does not reset the count. Reaching
    ``security.max_login_attempts`` disconnects the client. A blank
    username abandons the login and counts as a failure.
    """

    names = ("login",)
    help = "Log in with an existing account"

    async def execute(self, session: Session, args: list[str]) -> None:
        backoff = session.settings.security.login_backoff

        while True:
            username = await session.prompt("Username: ")
            if not username:
                if await self._fail(session):
                    return
                raise AuthenticationError("Login cancelled.")
            password = await session.prompt("Password: ")

            if await self._check(session, username, password):
                session.transition(SessionStatus.logged_on(username))
                logger.info("Successful login from user %s (%s)", username, session.peer)
                await session.writeln("Login successful!", ansi.SUCCESS)
                return

            logger.info("Failed login for %r from %s (attempt %d/%d)",
                        username, session.peer, session.failed_logins + 1,
                        session.settings.security.max_login_attempts)
            session.transition(SessionStatus.logged_off())
            await session.writeln("Login failed!", ansi.ERROR)
            if await self._fail(session):
                return
            if backoff > 0:
                await asyncio.sleep(backoff * session.failed_logins)

    @staticmethod
    async def _fail(session: Session) -> bool:
        """Record a failure; on the last allowed one, disconnect and return True."""
        if not session.record_failed_login():
            return False
        logger.warning("Too many failed logins from %s, disconnecting", session.peer)
        await session.writeln("Too many failed login attempts. Goodbye!", ansi.ERROR)
        session.transition(SessionStatus.disconnected())
        return True

    @staticmethod
    async def _check(session: Session, username: str, password: str) -> bool:
        user = await session.state.find_user(username)
        if user is None:
            return False
        return await session.hasher.verify_async(password, user.password)


class RegisterCommand(Command):
    """Create an account and log straight into it."""

    names = ("register",)
    help = "Create a new account"

    async def execute(self, session: Session, args: list[str]) -> None:
        username = await session.prompt("Choose a username: ")
        if not valid_username(username):
            raise InvalidInputError(
                "Invalid username. Use 3-20 letters, numbers, underscores or hyphens."
            )
        password = await session.prompt("Choose a password: ")
        min_length = session.settings.security.min_password_length
        if len(password) < min_length:
            raise InvalidInputError(f"Password must be at least {min_length} characters.")

        try:
            password_hash = await session.hasher.hash_async(password)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e
        # Uniqueness is checked under the users write lock
        user = await session.state.add_user(username, password_hash)

        session.transition(SessionStatus.logged_on(user.username))
        await session.writeln("Registration successful!", ansi.SUCCESS)
        await session.writeln("Login successful!", ansi.SUCCESS)
