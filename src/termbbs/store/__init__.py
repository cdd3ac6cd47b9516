"""Shared state and persistence for termbbs.

Public API:
    SharedState -- lock-guarded users/messages collections
    PersistentStore -- JSON snapshot files
    ReadWriteLock -- asyncio many-readers / single-writer lock
"""

from termbbs.store.persistence import PersistentStore
from termbbs.store.rwlock import ReadWriteLock
from termbbs.store.state import SharedState

__all__ = ["PersistentStore", "ReadWriteLock", "SharedState"]
