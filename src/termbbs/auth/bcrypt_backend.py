"""bcrypt password hashing backend."""

from __future__ import annotations

import logging

import bcrypt

from termbbs.auth.base import PasswordHasher

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes; recent releases refuse longer input
MAX_PASSWORD_BYTES = 72


class BcryptHasher(PasswordHasher):
    """Salted bcrypt hashes stored as UTF-8 ``$2b$...`` strings."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False
