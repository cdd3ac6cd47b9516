"""Per-connection session state machine.

A Session owns one client's reader/writer pair and its login status.
It greets the client, then loops: prompt, read a line, resolve the
first word against the commands reachable in the current phase, and
execute. Commands do all their I/O through the session.

Status transitions::

    LoggedOff --login/register--> LoggedOn(username) --quit--> Disconnected
    LoggedOff --quit--> Disconnected
"""

from __future__ import annotations

import asyncio
import logging

from termbbs.auth.base import PasswordHasher
from termbbs.commands.registry import CommandRegistry
from termbbs.config.settings import Settings
from termbbs.domain.models import Phase, SessionStatus
from termbbs.errors import (
    CommandError,
    ConnectionClosedError,
    SessionIOError,
    SessionTimeoutError,
)
from termbbs.server.telnet import clean_telnet_input
from termbbs.store.state import SharedState
from termbbs.utils import ansi
from termbbs.utils.ansi import AnsiStyle

logger = logging.getLogger(__name__)

LINE_END = "\r\n"


class Session:
    """Server-side state and I/O handle for one connected client."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        state: SharedState,
        registry: CommandRegistry,
        hasher: PasswordHasher,
        settings: Settings | None = None,
        banner: str | None = None,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._state = state
        self._registry = registry
        self._hasher = hasher
        self._settings = settings or Settings()
        self._banner = banner
        self._status = SessionStatus.logged_off()
        self._failed_logins = 0
        self._peer = _format_peer(writer.get_extra_info("peername"))

    # -------------------------------------------------------------------
    # Accessors used by commands
    # -------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def state(self) -> SharedState:
        return self._state

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def hasher(self) -> PasswordHasher:
        return self._hasher

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def peer(self) -> str:
        return self._peer

    @property
    def failed_logins(self) -> int:
        """Failed or abandoned login attempts on this connection."""
        return self._failed_logins

    def record_failed_login(self) -> bool:
        """Count one failed login; True once the per-connection cap is hit."""
        self._failed_logins += 1
        return self._failed_logins >= self._settings.security.max_login_attempts

    def transition(self, status: SessionStatus) -> None:
        """Move to ``status``.

        Raises:
            ValueError: If the state machine does not allow the move.
        """
        if not self._status.can_transition_to(status):
            raise ValueError(
                f"Illegal session transition {self._status.phase.value} -> {status.phase.value}"
            )
        self._status = status

    # -------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------

    async def run(self) -> None:
        """Greet the client and process commands until it disconnects.

        Raises:
            SessionIOError: If the connection fails. The caller closes it.
        """
        logger.info("Session started for %s", self._peer)
        await self.welcome()
        while not self._status.is_disconnected:
            line = await self.prompt(self._settings.display.prompt)
            await self.dispatch(line)
        logger.info("Session for %s ended", self._peer)

    async def dispatch(self, line: str) -> None:
        """Resolve and execute one input line.

        Domain failures are written to the client as one line; transport
        failures propagate.
        """
        phase_before = self._status.phase
        try:
            command, args = self._registry.resolve(phase_before, line)
            logger.debug("%s -> %s %s", self._peer, command.name, args)
            await command.execute(self, args)
        except CommandError as e:
            logger.debug("Command failed for %s: %s", self._peer, e)
            await self.writeln(str(e), ansi.ERROR)
            return
        if phase_before is Phase.LOGGED_OFF and self._status.is_logged_on:
            await self.writeln("")
            await self.show_commands()

    async def welcome(self) -> None:
        if self._banner:
            for line in self._banner.splitlines():
                await self.writeln(line)
        welcome_msg = self._settings.server.welcome_msg
        if welcome_msg:
            await self.writeln(welcome_msg, ansi.HEADING)
        await self.writeln("")
        await self.show_commands()

    async def show_commands(self) -> None:
        await self.writeln("Commands:", ansi.HEADING)
        await self.writeln(" | ".join(self._registry.names(self._status.phase)))

    # -------------------------------------------------------------------
    # I/O
    # -------------------------------------------------------------------

    async def prompt(self, text: str) -> str:
        """Write ``text`` without a line terminator and read the answer."""
        await self.write(text)
        return await self.readline()

    async def readline(self) -> str:
        """Read one line, stripped of telnet codes and surrounding whitespace.

        Raises:
            ConnectionClosedError: If the peer closed the connection.
            SessionTimeoutError: If the idle timeout expired.
            SessionIOError: On any other read failure.
        """
        timeout = self._settings.security.idle_timeout or None
        try:
            data = await asyncio.wait_for(self._reader.readline(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._notify_timeout()
            raise SessionTimeoutError("Idle timeout", peer=self._peer) from None
        except (OSError, ValueError) as e:
            # ValueError: line exceeded the stream buffer limit
            raise SessionIOError(f"Could not read from client: {e}", peer=self._peer) from e
        if not data:
            raise ConnectionClosedError("Connection closed by peer", peer=self._peer)
        return clean_telnet_input(data).strip()

    async def read_block(self, terminator: str = ".") -> list[str]:
        """Read lines until one equals ``terminator``; the terminator is dropped."""
        lines: list[str] = []
        while True:
            line = await self.readline()
            if line == terminator:
                return lines
            lines.append(line)

    async def write(self, data: str, style: AnsiStyle | None = None) -> None:
        """Send ``data`` and wait until it has been flushed."""
        if style is not None and self._settings.display.use_ansi:
            data = style.apply(data)
        try:
            self._writer.write(data.encode("utf-8"))
            await self._writer.drain()
        except OSError as e:
            raise SessionIOError(f"Could not send data to client: {e}", peer=self._peer) from e

    async def writeln(self, data: str = "", style: AnsiStyle | None = None) -> None:
        if style is not None and self._settings.display.use_ansi:
            data = style.apply(data)
        await self.write(data + LINE_END)

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._writer.is_closing():
            return
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError as e:
            logger.debug("Error while closing %s: %s", self._peer, e)

    async def _notify_timeout(self) -> None:
        try:
            await self.writeln("")
            await self.writeln("Idle timeout. Disconnecting.", ansi.ERROR)
        except SessionIOError:
            logger.debug("Could not send idle timeout notice to %s", self._peer)


def _format_peer(peername: object) -> str:
    if isinstance(peername, tuple) and len(peername) >= 2:
        return f"{peername[0]}:{peername[1]}"
    return str(peername) if peername else "unknown"
