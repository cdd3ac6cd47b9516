"""JSON snapshot files for the users and messages collections.

Each collection lives in its own file as a pretty-printed JSON array and
is rewritten in full on every save. Writes go to a temporary file in the
same directory which then replaces the target with ``os.replace``, so a
crash mid-write leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from termbbs.domain.models import Message, User
from termbbs.errors import PersistenceError, StoreLoadError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_USERS_ADAPTER = TypeAdapter(list[User])
_MESSAGES_ADAPTER = TypeAdapter(list[Message])


class PersistentStore:
    """Loads and saves snapshots of the two collections."""

    def __init__(
        self,
        users_path: Path | str = "users.json",
        messages_path: Path | str = "messages.json",
    ) -> None:
        self._users_path = Path(users_path)
        self._messages_path = Path(messages_path)

    @property
    def users_path(self) -> Path:
        return self._users_path

    @property
    def messages_path(self) -> Path:
        return self._messages_path

    def load_users(self) -> list[User]:
        """Load the users snapshot.

        Raises:
            StoreLoadError: If the file is unreadable, malformed, or holds
                duplicate ids or usernames.
        """
        users = _load(self._users_path, _USERS_ADAPTER)
        _require_unique(self._users_path, "id", [u.id for u in users])
        _require_unique(self._users_path, "username", [u.username for u in users])
        return users

    def load_messages(self) -> list[Message]:
        messages = _load(self._messages_path, _MESSAGES_ADAPTER)
        _require_unique(self._messages_path, "id", [m.id for m in messages])
        return messages

    def save_users(self, users: Sequence[User]) -> None:
        _save(self._users_path, users)

    def save_messages(self, messages: Sequence[Message]) -> None:
        _save(self._messages_path, messages)


def _load(path: Path, adapter: TypeAdapter) -> list:
    """Read a snapshot. A missing file is an empty collection."""
    if not path.exists():
        logger.info("Snapshot %s not found, starting empty", path)
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StoreLoadError(f"Cannot read {path}: {e}", path=str(path)) from e
    try:
        records = adapter.validate_json(text)
    except ValidationError as e:
        raise StoreLoadError(f"Malformed snapshot {path}: {e}", path=str(path)) from e
    logger.info("Loaded %d records from %s", len(records), path)
    return records


def _require_unique(path: Path, field: str, values: Sequence[object]) -> None:
    seen: set[object] = set()
    for value in values:
        if value in seen:
            raise StoreLoadError(f"Duplicate {field} {value!r} in {path}", path=str(path))
        seen.add(value)


def _save(path: Path, records: Sequence[ModelT]) -> None:
    """Atomically replace ``path`` with a snapshot of ``records``."""
    data = json.dumps([r.model_dump(mode="json") for r in records], indent=2)
    directory = path.parent
    tmp_name: str | None = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=directory,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise PersistenceError(f"Could not save {path.name}: {e.strerror or e}", path=str(path)) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp_name)
    logger.debug("Saved %d records to %s", len(records), path)
