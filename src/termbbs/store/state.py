"""Shared, lock-guarded users and messages collections.

One ``SharedState`` is created by the server at startup and handed to
every session. Each collection has its own :class:`ReadWriteLock`, so
posting a message never waits on a registration and vice versa.

Every read-then-write sequence (compute the next id, check uniqueness,
append, persist) runs under the collection's write lock from start to
finish.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from termbbs.domain.models import Collection, Message, User
from termbbs.errors import DuplicateUserError, MessageNotFoundError, PersistenceError
from termbbs.store.persistence import PersistentStore
from termbbs.store.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


def next_id(records: Sequence[User] | Sequence[Message]) -> int:
    """Return max(existing ids) + 1, or 0 for an empty collection."""
    return max((r.id for r in records), default=-1) + 1


class SharedState:
    """In-memory users and messages backed by a PersistentStore."""

    def __init__(
        self,
        store: PersistentStore,
        users: list[User] | None = None,
        messages: list[Message] | None = None,
    ) -> None:
        self._store = store
        self._users: list[User] = list(users or [])
        self._messages: list[Message] = list(messages or [])
        self._users_lock = ReadWriteLock()
        self._messages_lock = ReadWriteLock()
        self._degraded = False

    @classmethod
    def load(cls, store: PersistentStore) -> SharedState:
        """Build the state from the store's snapshot files.

        Raises:
            StoreLoadError: If a snapshot file exists but is malformed or
                repeats an id or username.
        """
        return cls(store, users=store.load_users(), messages=store.load_messages())

    @property
    def store(self) -> PersistentStore:
        return self._store

    @property
    def degraded(self) -> bool:
        """True once any save has failed since startup."""
        return self._degraded

    # -------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------

    async def find_user(self, username: str) -> User | None:
        async with self._users_lock.read():
            for user in self._users:
                if user.username == username:
                    return user
        return None

    async def list_users(self) -> list[User]:
        async with self._users_lock.read():
            return list(self._users)

    async def add_user(self, username: str, password_hash: str) -> User:
        """Insert a new user and persist the users collection.

        Raises:
            DuplicateUserError: If the username is already registered.
            PersistenceError: If the snapshot could not be written; the
                insert is rolled back.
        """
        async with self._users_lock.write():
            if any(u.username == username for u in self._users):
                raise DuplicateUserError(username)
            user = User(id=next_id(self._users), username=username, password=password_hash)
            self._users.append(user)
            try:
                await self._persist(Collection.USERS, list(self._users))
            except PersistenceError:
                self._users.pop()
                raise
        logger.info("Registered user %s (id=%d)", user.username, user.id)
        return user

    # -------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------

    async def list_messages(self) -> list[Message]:
        async with self._messages_lock.read():
            return list(self._messages)

    async def get_message(self, message_id: int) -> Message:
        """Look a message up by its stored id.

        Raises:
            MessageNotFoundError: If no message has that id.
        """
        async with self._messages_lock.read():
            for message in self._messages:
                if message.id == message_id:
                    return message
        raise MessageNotFoundError(message_id)

    async def add_message(self, username: str, subject: str, body: str) -> Message:
        """Append a new message and persist the messages collection.

        Raises:
            PersistenceError: If the snapshot could not be written; the
                append is rolled back.
        """
        async with self._messages_lock.write():
            message = Message(
                id=next_id(self._messages),
                username=username,
                subject=subject,
                body=body,
            )
            self._messages.append(message)
            try:
                await self._persist(Collection.MESSAGES, list(self._messages))
            except PersistenceError:
                self._messages.pop()
                raise
        logger.info("Message %d posted by %s", message.id, message.username)
        return message

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------

    async def save(self, kind: Collection) -> None:
        """Write a snapshot of one collection.

        Raises:
            PersistenceError: If the snapshot could not be written.
        """
        if kind is Collection.USERS:
            async with self._users_lock.read():
                await self._persist(kind, list(self._users))
        else:
            async with self._messages_lock.read():
                await self._persist(kind, list(self._messages))

    async def _persist(self, kind: Collection, records: list) -> None:
        # Caller holds the collection's lock
        save = self._store.save_users if kind is Collection.USERS else self._store.save_messages
        try:
            await asyncio.to_thread(save, records)
        except PersistenceError as e:
            self._degraded = True
            logger.error("Failed to persist %s: %s", kind.value, e)
            raise
