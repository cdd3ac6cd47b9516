"""Exception hierarchy for termbbs.

Two families matter to a running session:

- ``SessionIOError`` -- transport failures. Always fatal to the owning
  session; the connection is torn down and never retried.
- ``CommandError`` -- domain failures. Always recoverable; the message is
  written to the client as a single line and the session continues.
"""

from __future__ import annotations


class TermbbsError(Exception):
    """Base class for all termbbs errors."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class SessionIOError(TermbbsError):
    """Raised when reading from or writing to a client connection fails."""

    def __init__(self, message: str, peer: str = "") -> None:
        super().__init__(message)
        self.peer = peer


class ConnectionClosedError(SessionIOError):
    """The peer closed the connection."""


class SessionTimeoutError(SessionIOError):
    """The peer sent nothing within the idle timeout."""


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------


class CommandError(TermbbsError):
    """A recoverable failure reported to the client as one line of text."""


class CommandNotFoundError(CommandError):
    """No command with the given name is reachable in the current phase."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: {name}. Type 'help' for a list of commands.")
        self.name = name


class InvalidInputError(CommandNotFoundError):
    """The input could not be parsed into a command or its arguments."""

    def __init__(self, message: str = "Invalid input. Type 'help' for a list of commands.") -> None:
        CommandError.__init__(self, message)
        self.name = ""


class AuthenticationError(CommandError):
    """Login failed or was aborted."""


class DuplicateUserError(CommandError):
    """A user with the requested username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username '{username}' is already taken.")
        self.username = username


class MessageNotFoundError(CommandError):
    """No message with the requested id exists."""

    def __init__(self, message_id: int) -> None:
        super().__init__(f"Message {message_id} not found.")
        self.message_id = message_id


class PersistenceError(CommandError):
    """A snapshot could not be written to stable storage."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


class StoreLoadError(TermbbsError):
    """A snapshot file exists but could not be parsed."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path
