"""Domain models for termbbs.

This package contains the records kept in the shared store and the
session status values. All models use Pydantic v2 for validation and
serialization.
"""

from termbbs.domain.models import (
    Collection,
    Message,
    Phase,
    SessionStatus,
    User,
)

__all__ = [
    "Collection",
    "Message",
    "Phase",
    "SessionStatus",
    "User",
]
