"""
Unit tests for the account directory.
"""

import json

import pytest

from accounts import AccountDirectory
from errors import DuplicateUsername, InvalidCredentials, ValidationError
from storage import MemoryStorage


# ── tests ─────────────────────────────────────────────────────────────────────

class TestRegister:
    def test_register_appends_and_persists(self):
        storage = MemoryStorage()
        accounts = AccountDirectory(storage)
        user = accounts.register("alice", "secret")

        assert user.username == "alice"
        assert len(accounts) == 1
        stored = json.loads(storage.get_item("users"))
        assert [u["username"] for u in stored] == ["alice"]

    def test_password_is_not_stored_in_plain_text(self):
        storage = MemoryStorage()
        AccountDirectory(storage).register("alice", "secret")
        stored = json.loads(storage.get_item("users"))[0]
        assert "password" not in stored
        assert stored["password_hash"] != "secret"

    def test_duplicate_username_rejected(self):
        accounts = AccountDirectory(MemoryStorage())
        accounts.register("alice", "secret")
        with pytest.raises(DuplicateUsername):
            accounts.register("alice", "other")
        assert len(accounts) == 1

    def test_usernames_are_case_sensitive(self):
        accounts = AccountDirectory(MemoryStorage())
        accounts.register("alice", "secret")
        accounts.register("Alice", "secret")
        assert len(accounts) == 2

    @pytest.mark.parametrize("username,password", [("", "secret"), ("alice", ""), (None, "x")])
    def test_blank_fields_rejected(self, username, password):
        accounts = AccountDirectory(MemoryStorage())
        with pytest.raises(ValidationError):
            accounts.register(username, password)
        assert len(accounts) == 0


class TestLogin:
    def test_login_after_register(self):
        accounts = AccountDirectory(MemoryStorage())
        accounts.register("alice", "secret")
        assert accounts.login("alice", "secret").username == "alice"

    def test_wrong_password(self):
        accounts = AccountDirectory(MemoryStorage())
        accounts.register("alice", "secret")
        with pytest.raises(InvalidCredentials):
            accounts.login("alice", "wrong")

    def test_unknown_user_gets_same_error(self):
        accounts = AccountDirectory(MemoryStorage())
        with pytest.raises(InvalidCredentials) as exc:
            accounts.login("bob", "secret")
        assert exc.value.message == "Invalid credentials"

    def test_blank_login_is_invalid_credentials(self):
        accounts = AccountDirectory(MemoryStorage())
        with pytest.raises(InvalidCredentials):
            accounts.login("", "")


class TestPersistence:
    def test_reload_keeps_users(self):
        storage = MemoryStorage()
        first = AccountDirectory(storage)
        first.register("alice", "secret")
        first.register("bob", "hunter2")

        second = AccountDirectory(storage)
        assert second.users() == first.users()
        assert second.login("bob", "hunter2").username == "bob"

    def test_plain_password_records_still_log_in(self):
        storage = MemoryStorage({"users": json.dumps([{"username": "old", "password": "pw"}])})
        accounts = AccountDirectory(storage)
        assert accounts.login("old", "pw").username == "old"

    @pytest.mark.parametrize("raw", [
        "not json",
        "{}",
        '[{"username": 1}]',
        '[{"username": "a", "password": null}]',
        '[{"username": "a", "password": 5}]',
    ])
    def test_unreadable_users_start_empty(self, raw):
        accounts = AccountDirectory(MemoryStorage({"users": raw}))
        assert len(accounts) == 0
