# tests/test_user_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskflow.users.user_store import UserStore


def test_add_find_and_update_email(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "users.sqlite3")

    uid = store.add_user(email=" Alice@Example.com ", name="Alice")
    user = store.find_user_by_id(uid)

    assert user is not None
    assert user.email == "alice@example.com"
    assert user.can_receive_mail

    store.update_user_email(uid, "")
    user = store.find_user_by_id(uid)
    assert user is not None
    assert user.email is None
    assert not user.can_receive_mail

    assert store.find_user_by_id(uid + 100) is None


def test_duplicate_email_is_rejected(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "users.sqlite3")
    store.add_user(email="a@x.com")
    other = store.add_user(email="b@x.com")

    with pytest.raises(ValueError):
        store.add_user(email="A@x.com")
    with pytest.raises(ValueError):
        store.update_user_email(other, "a@x.com")


def test_users_without_email_can_coexist(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "users.sqlite3")
    a = store.add_user(email=None, name="no mail 1")
    b = store.add_user(email=None, name="no mail 2")
    assert a != b
