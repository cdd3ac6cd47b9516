"""Shared test fixtures for the termbbs test suite.

Provides common fixtures used across unit tests: a fast password
hasher, a store rooted in a temporary directory, test settings, and a
factory for sessions wired to an in-memory client connection.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable

import pytest

from termbbs.auth.bcrypt_backend import BcryptHasher
from termbbs.commands.registry import CommandRegistry, build_default_registry
from termbbs.config.settings import DisplayConfig, SecurityConfig, Settings
from termbbs.server.session import Session
from termbbs.store.persistence import PersistentStore
from termbbs.store.state import SharedState
from termbbs.utils.ansi import strip_ansi


# ---------------------------------------------------------------------------
# Fake connection
# ---------------------------------------------------------------------------


class FakeWriter:
    """Stands in for asyncio.StreamWriter and records everything sent."""

    def __init__(self, peername: tuple[str, int] = ("127.0.0.1", 40000)) -> None:
        self.buffer = bytearray()
        self.drain_count = 0
        self.closed = False
        self._peername = peername

    def write(self, data: bytes) -> None:
        if self.closed:
            raise ConnectionResetError("writer closed")
        self.buffer.extend(data)

    async def drain(self) -> None:
        self.drain_count += 1

    def close(self) -> None:
        self.closed = True

    def is_closing(self) -> bool:
        return self.closed

    async def wait_closed(self) -> None:
        return None

    def get_extra_info(self, name: str, default: object = None) -> object:
        if name == "peername":
            return self._peername
        return default

    @property
    def raw(self) -> str:
        return self.buffer.decode("utf-8")

    @property
    def text(self) -> str:
        return strip_ansi(self.raw)


def make_reader(*lines: str, eof: bool = True) -> asyncio.StreamReader:
    """A StreamReader pre-loaded with CRLF-terminated lines.

    Must be called from inside a running event loop.
    """
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data((line + "\r\n").encode("utf-8"))
    if eof:
        reader.feed_eof()
    return reader


# ---------------------------------------------------------------------------
# Component Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hasher() -> BcryptHasher:
    """bcrypt at the minimum cost so tests stay fast."""
    return BcryptHasher(rounds=4)


@pytest.fixture
def settings() -> Settings:
    """Settings with no login backoff, no idle timeout and no colours."""
    return Settings(
        security=SecurityConfig(login_backoff=0, idle_timeout=0, bcrypt_rounds=4),
        display=DisplayConfig(use_ansi=False),
    )


@pytest.fixture
def store(tmp_path: Path) -> PersistentStore:
    """A PersistentStore writing into a temporary directory."""
    return PersistentStore(tmp_path / "users.json", tmp_path / "messages.json")


@pytest.fixture
def shared_state(store: PersistentStore) -> SharedState:
    """An empty SharedState backed by the temporary store."""
    return SharedState(store)


@pytest.fixture
def fake_writer() -> FakeWriter:
    return FakeWriter()


@pytest.fixture
def registry() -> CommandRegistry:
    return build_default_registry()


@pytest.fixture
def make_session(
    shared_state: SharedState,
    registry: CommandRegistry,
    hasher: BcryptHasher,
    settings: Settings,
) -> Callable[..., tuple[Session, FakeWriter]]:
    """Factory for a Session whose client will send the given lines.

    Call it from inside an async test.
    """

    def _make(*lines: str, eof: bool = True, banner: str | None = None) -> tuple[Session, FakeWriter]:
        writer = FakeWriter()
        session = Session(
            make_reader(*lines, eof=eof),
            writer,  # type: ignore[arg-type]
            state=shared_state,
            registry=registry,
            hasher=hasher,
            settings=settings,
            banner=banner,
        )
        return session, writer

    return _make
