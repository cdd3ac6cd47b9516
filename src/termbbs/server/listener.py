"""TCP accept loop.

The BoardServer owns the shared state, the command registry and the
password hasher, and starts one Session task per accepted connection.
"""

from __future__ import annotations

import asyncio
import logging

from termbbs.auth.base import PasswordHasher
from termbbs.commands.registry import CommandRegistry, build_default_registry
from termbbs.config.settings import Settings, read_banner
from termbbs.errors import ConnectionClosedError, SessionIOError, SessionTimeoutError
from termbbs.server.session import Session
from termbbs.store.state import SharedState

logger = logging.getLogger(__name__)


class BoardServer:
    """Accepts connections and runs a Session for each one."""

    def __init__(
        self,
        settings: Settings,
        state: SharedState,
        hasher: PasswordHasher,
        registry: CommandRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._state = state
        self._hasher = hasher
        self._registry = registry or build_default_registry()
        self._banner = read_banner(settings.server)
        self._server: asyncio.AbstractServer | None = None
        self._sessions: set[Session] = set()

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    @property
    def port(self) -> int | None:
        """The bound port (useful when configured as 0 in tests)."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        cfg = self._settings.server
        self._server = await asyncio.start_server(
            self._handle_client, host=cfg.hostname, port=cfg.port
        )
        addrs = ", ".join(str(sock.getsockname()) for sock in self._server.sockets)
        logger.info("Listening on %s", addrs)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        server = self._server
        if server is None:
            raise RuntimeError("Board server failed to start")
        async with server:
            await server.serve_forever()

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        for session in list(self._sessions):
            await session.close()
        await self._server.wait_closed()
        self._server = None
        logger.info("Server stopped")

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        session = Session(
            reader,
            writer,
            state=self._state,
            registry=self._registry,
            hasher=self._hasher,
            settings=self._settings,
            banner=self._banner,
        )
        self._sessions.add(session)
        logger.info("Connection from %s", session.peer)
        try:
            await session.run()
        except ConnectionClosedError:
            logger.info("Client %s disconnected", session.peer)
        except SessionTimeoutError:
            logger.info("Client %s timed out", session.peer)
        except SessionIOError as e:
            logger.warning("Connection error for %s: %s", session.peer, e)
        except Exception:
            logger.exception("Unexpected error in session for %s", session.peer)
        finally:
            self._sessions.discard(session)
            await session.close()
