"""Password hashing for termbbs.

Public API:
    PasswordHasher -- Abstract base class
    BcryptHasher -- bcrypt backend
"""

from termbbs.auth.base import PasswordHasher

__all__ = ["PasswordHasher", "BcryptHasher"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "BcryptHasher":
        from termbbs.auth.bcrypt_backend import BcryptHasher
        return BcryptHasher
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
