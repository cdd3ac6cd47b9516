"""Abstract base class for password hashing.

The session core only ever hashes and verifies passwords through this
interface, so the hashing scheme can be swapped (bcrypt in production,
cheaper schemes in tests) without touching the commands.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """Hash/verify capability for user passwords.

    Both methods are CPU bound. Async callers should use the ``*_async``
    wrappers, which run them in a worker thread so other sessions keep
    being served.
    """

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return an opaque hash string for ``password``.

        Raises:
            ValueError: If the backend cannot hash this password.
        """
        ...

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        """Check ``password`` against a hash produced by :meth:`hash`.

        Must return False (not raise) for a malformed hash.
        """
        ...

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self.verify, password, hashed)
