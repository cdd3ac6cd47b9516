"""Tests for the JSON snapshot store."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from termbbs.domain.models import Message, User
from termbbs.errors import PersistenceError, StoreLoadError
from termbbs.store.persistence import PersistentStore


@pytest.fixture
def users() -> list[User]:
    return [
        User(id=0, username="alice", password="$2b$04$hash-a"),
        User(id=1, username="bob", password="$2b$04$hash-b"),
    ]


@pytest.fixture
def messages() -> list[Message]:
    return [Message(id=0, username="alice", subject="Hi", body="Hello\nworld")]


class TestLoad:
    def test_missing_files_are_empty(self, store: PersistentStore) -> None:
        assert store.load_users() == []
        assert store.load_messages() == []

    def test_malformed_json_raises(self, store: PersistentStore) -> None:
        store.users_path.write_text("{not json")
        with pytest.raises(StoreLoadError) as exc_info:
            store.load_users()
        assert exc_info.value.path == str(store.users_path)

    def test_invalid_record_raises(self, store: PersistentStore) -> None:
        store.messages_path.write_text(json.dumps([{"id": "zero", "username": "a"}]))
        with pytest.raises(StoreLoadError):
            store.load_messages()

    def test_invalid_utf8_raises(self, store: PersistentStore) -> None:
        store.users_path.write_bytes(b"[\xff\xfe]")
        with pytest.raises(StoreLoadError) as exc_info:
            store.load_users()
        assert exc_info.value.path == str(store.users_path)

    def test_duplicate_user_ids_raise(self, store: PersistentStore) -> None:
        store.users_path.write_text(
            json.dumps([
                {"id": 0, "username": "bob", "password": "h"},
                {"id": 0, "username": "carol", "password": "h"},
            ])
        )
        with pytest.raises(StoreLoadError, match="Duplicate id 0"):
            store.load_users()

    def test_duplicate_usernames_raise(self, store: PersistentStore) -> None:
        store.users_path.write_text(
            json.dumps([
                {"id": 0, "username": "bob", "password": "h1"},
                {"id": 1, "username": "bob", "password": "h2"},
            ])
        )
        with pytest.raises(StoreLoadError, match="Duplicate username 'bob'"):
            store.load_users()

    def test_duplicate_message_ids_raise(self, store: PersistentStore) -> None:
        store.messages_path.write_text(
            json.dumps([
                {"id": 4, "username": "bob", "subject": "a", "body": ""},
                {"id": 4, "username": "bob", "subject": "b", "body": ""},
            ])
        )
        with pytest.raises(StoreLoadError, match="Duplicate id 4"):
            store.load_messages()

    def test_reads_existing_snapshot(self, store: PersistentStore) -> None:
        store.users_path.write_text(
            json.dumps([{"id": 3, "username": "carol", "password": "h"}])
        )
        assert store.load_users() == [User(id=3, username="carol", password="h")]


class TestSave:
    def test_round_trip(
        self, store: PersistentStore, users: list[User], messages: list[Message]
    ) -> None:
        store.save_users(users)
        store.save_messages(messages)
        assert store.load_users() == users
        assert store.load_messages() == messages

    def test_pretty_printed_with_expected_keys(
        self, store: PersistentStore, messages: list[Message]
    ) -> None:
        store.save_messages(messages)
        text = store.messages_path.read_text()
        assert "\n  " in text
        assert json.loads(text) == [
            {"id": 0, "username": "alice", "subject": "Hi", "body": "Hello\nworld"}
        ]

    def test_save_only_touches_requested_collection(
        self, store: PersistentStore, users: list[User]
    ) -> None:
        store.save_users(users)
        assert store.users_path.exists()
        assert not store.messages_path.exists()

    def test_save_overwrites(self, store: PersistentStore, users: list[User]) -> None:
        store.save_users(users)
        store.save_users(users[:1])
        assert store.load_users() == users[:1]

    def test_creates_parent_directory(self, tmp_path: Path, users: list[User]) -> None:
        store = PersistentStore(tmp_path / "data" / "users.json", tmp_path / "data" / "messages.json")
        store.save_users(users)
        assert store.load_users() == users

    def test_failed_replace_keeps_previous_snapshot(
        self, store: PersistentStore, users: list[User]
    ) -> None:
        store.save_users(users[:1])
        with patch("termbbs.store.persistence.os.replace", side_effect=OSError(28, "No space left")):
            with pytest.raises(PersistenceError):
                store.save_users(users)
        assert store.load_users() == users[:1]
        leftovers = [p for p in store.users_path.parent.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []

    def test_unwritable_directory_raises_persistence_error(
        self, tmp_path: Path, users: list[User]
    ) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = PersistentStore(blocker / "users.json", blocker / "messages.json")
        with pytest.raises(PersistenceError):
            store.save_users(users)
