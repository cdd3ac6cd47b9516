"""Core domain models for the termbbs system.

These models represent the records kept in the shared store (users and
messages) and the login state that gates which commands a connection can
reach.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Phase(str, enum.Enum):
    """Login phase of a session."""

    LOGGED_OFF = "logged_off"
    LOGGED_ON = "logged_on"
    DISCONNECTED = "disconnected"  # Terminal, no commands reachable


class Collection(str, enum.Enum):
    """The independently persisted collections of the shared store."""

    USERS = "users"
    MESSAGES = "messages"


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class User(BaseModel):
    """A registered account. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="Unique, increasing user id")
    username: str = Field(min_length=1, description="Unique login name")
    password: str = Field(description="Opaque password hash")


class Message(BaseModel):
    """A posted message. Immutable once created.

    ``username`` is a soft reference to the author; it is not checked
    against the users collection.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="Unique, increasing message id")
    username: str = Field(description="Author's username")
    subject: str = Field(description="One-line subject")
    body: str = Field(default="", description="Message text, lines joined with newlines")


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


class SessionStatus(BaseModel):
    """Login status of one connection.

    Allowed transitions: LoggedOff -> LoggedOff, LoggedOff -> LoggedOn,
    LoggedOff -> Disconnected, LoggedOn -> Disconnected.
    """

    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.LOGGED_OFF
    username: str | None = None

    @classmethod
    def logged_off(cls) -> SessionStatus:
        return cls(phase=Phase.LOGGED_OFF)

    @classmethod
    def logged_on(cls, username: str) -> SessionStatus:
        return cls(phase=Phase.LOGGED_ON, username=username)

    @classmethod
    def disconnected(cls) -> SessionStatus:
        return cls(phase=Phase.DISCONNECTED)

    @property
    def is_logged_on(self) -> bool:
        return self.phase is Phase.LOGGED_ON

    @property
    def is_disconnected(self) -> bool:
        return self.phase is Phase.DISCONNECTED

    def can_transition_to(self, other: SessionStatus) -> bool:
        if self.phase is Phase.LOGGED_OFF:
            return True
        if self.phase is Phase.LOGGED_ON:
            return other.phase is Phase.DISCONNECTED
        return False
