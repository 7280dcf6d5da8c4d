# src/taskflow/users/user_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from .user_models import User

logger = logging.getLogger(__name__)


class UserStore:
    """
    SQLite user store.

    Only what the reminder pipeline and the task layer need: create a user,
    look one up by id, change the email. Credentials live elsewhere.
    """

    def __init__(self, db_path: str | Path = "taskflow.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("UserStore ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE,
                    name TEXT NOT NULL DEFAULT '',
                    created_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _normalize_email(email: str | None) -> str | None:
        if email is None:
            return None
        email = email.strip().lower()
        return email or None

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            email=row["email"],
            name=str(row["name"] or ""),
            created_at=float(row["created_at"] or 0.0),
        )

    def add_user(self, *, email: str | None, name: str = "") -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            try:
                cur.execute(
                    "INSERT INTO users(email, name, created_at) VALUES (?, ?, ?)",
                    (self._normalize_email(email), name.strip(), time.time()),
                )
            except sqlite3.IntegrityError as e:
                raise ValueError(f"user with email {email!r} already exists") from e
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for users insert")
            return int(rowid)
        finally:
            conn.close()

    def find_user_by_id(self, user_id: int) -> User | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM users WHERE id = ?", (int(user_id),))
            row = cur.fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def update_user_email(self, user_id: int, email: str | None) -> None:
        conn = self._get_conn()
        try:
            try:
                conn.execute(
                    "UPDATE users SET email = ? WHERE id = ?",
                    (self._normalize_email(email), int(user_id)),
                )
            except sqlite3.IntegrityError as e:
                raise ValueError(f"email {email!r} is already taken") from e
            conn.commit()
        finally:
            conn.close()
