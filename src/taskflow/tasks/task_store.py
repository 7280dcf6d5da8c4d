# src/taskflow/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from .task_models import DEFAULT_BOARD_COLOR, Board, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

UPCOMING_HORIZON_SECONDS = 7 * 24 * 60 * 60

# Distinguishes "argument not passed" from an explicit None (e.g. clearing reminder_at).
_UNSET: Any = object()


class TaskStore:
    """
    SQLite store for boards and tasks.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "taskflow.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS boards (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    color TEXT NOT NULL DEFAULT '#7694b8',
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER NOT NULL,
                    board_id INTEGER,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    status TEXT NOT NULL DEFAULT 'pending',
                    due_at REAL,
                    reminder_at REAL,
                    reminder_sent INTEGER NOT NULL DEFAULT 0,
                    tags TEXT NOT NULL DEFAULT '[]',
                    notes TEXT NOT NULL DEFAULT '',
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("reminder_at", "REAL")
            add_col("reminder_sent", "INTEGER NOT NULL DEFAULT 0")
            add_col("tags", "TEXT NOT NULL DEFAULT '[]'")
            add_col("notes", "TEXT NOT NULL DEFAULT ''")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_reminder "
                "ON tasks(status, reminder_sent, reminder_at)"
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_board ON tasks(board_id)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_owner_due ON tasks(owner_id, due_at)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_boards_owner ON boards(owner_id)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _tags_to_str(tags: list[str] | None) -> str:
        if not tags:
            return "[]"
        return json.dumps([str(t).strip() for t in tags if str(t).strip()], ensure_ascii=False)

    @staticmethod
    def _str_to_tags(s: str | None) -> list[str]:
        if not s:
            return []
        try:
            val = json.loads(s)
        except ValueError:
            return []
        return [str(t) for t in val] if isinstance(val, list) else []

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            owner_id=int(row["owner_id"]),
            board_id=int(row["board_id"]) if row["board_id"] is not None else None,
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            priority=TaskPriority.from_db(row["priority"]),
            status=TaskStatus.from_db(row["status"]),
            due_at=float(row["due_at"]) if row["due_at"] is not None else None,
            reminder_at=float(row["reminder_at"]) if row["reminder_at"] is not None else None,
            reminder_sent=bool(row["reminder_sent"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            tags=self._str_to_tags(row["tags"]),
            notes=str(row["notes"] or ""),
        )

    @staticmethod
    def _row_to_board(row: sqlite3.Row) -> Board:
        keys = row.keys()
        return Board(
            id=int(row["id"]),
            owner_id=int(row["owner_id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            color=str(row["color"] or DEFAULT_BOARD_COLOR),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            task_count=int(row["task_count"]) if "task_count" in keys else 0,
            completed_count=int(row["completed_count"] or 0) if "completed_count" in keys else 0,
        )

    # ---- boards ----

    def add_board(
        self,
        *,
        owner_id: int,
        title: str,
        description: str = "",
        color: str | None = None,
    ) -> int:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO boards(owner_id, title, description, color, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (int(owner_id), title.strip(), description or "", color or DEFAULT_BOARD_COLOR, now, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for boards insert")
            logger.debug("Board added id=%s owner_id=%s", rowid, owner_id)
            return int(rowid)
        finally:
            conn.close()

    def get_board(self, board_id: int, *, owner_id: int | None = None) -> Board | None:
        """Fetch a board; when owner_id is given, boards of other owners are invisible."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if owner_id is None:
                cur.execute("SELECT * FROM boards WHERE id = ?", (int(board_id),))
            else:
                cur.execute(
                    "SELECT * FROM boards WHERE id = ? AND owner_id = ?",
                    (int(board_id), int(owner_id)),
                )
            row = cur.fetchone()
            return self._row_to_board(row) if row else None
        finally:
            conn.close()

    def list_boards_for_user(self, owner_id: int) -> list[Board]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT b.*,
                       COUNT(t.id) AS task_count,
                       SUM(CASE WHEN t.status = 'completed' THEN 1 ELSE 0 END) AS completed_count
                FROM boards b
                LEFT JOIN tasks t ON t.board_id = b.id
                WHERE b.owner_id = ?
                GROUP BY b.id
                ORDER BY b.created_at DESC, b.id DESC
                """,
                (int(owner_id),),
            )
            return [self._row_to_board(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_board(
        self,
        board_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        color: str | None = None,
    ) -> None:
        fields: list[str] = []
        params: list[Any] = []

        if title is not None:
            if not title.strip():
                raise ValueError("title must not be blank")
            fields.append("title = ?")
            params.append(title.strip())

        if description is not None:
            fields.append("description = ?")
            params.append(description)

        if color is not None:
            fields.append("color = ?")
            params.append(color)

        if not fields:
            return

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(int(board_id))

        conn = self._get_conn()
        try:
            conn.execute(f"UPDATE boards SET {', '.join(fields)} WHERE id = ?", params)
            conn.commit()
        finally:
            conn.close()

    def delete_board(self, board_id: int) -> bool:
        """Delete a board together with all of its tasks."""
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM tasks WHERE board_id = ?", (int(board_id),))
            cur = conn.execute("DELETE FROM boards WHERE id = ?", (int(board_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    # ---- tasks ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        owner_id: int,
        title: str,
        board_id: int | None = None,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.PENDING,
        due_at: float | None = None,
        reminder_at: float | None = None,
        tags: list[str] | None = None,
        notes: str = "",
    ) -> int:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(
                    owner_id, board_id, title, description, priority, status,
                    due_at, reminder_at, reminder_sent, tags, notes,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?, ?, ?)
                """,
                (
                    int(owner_id),
                    board_id,
                    title.strip(),
                    description or "",
                    TaskPriority(priority).value,
                    TaskStatus(status).value,
                    due_at,
                    reminder_at,
                    self._tags_to_str(tags),
                    notes or "",
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug(
                "Task added id=%s owner_id=%s board_id=%s reminder_at=%s",
                task_id,
                owner_id,
                board_id,
                reminder_at,
            )
            return task_id
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks_for_board(self, board_id: int) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM tasks WHERE board_id = ? ORDER BY created_at DESC, id DESC",
                (int(board_id),),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def list_upcoming_tasks(
        self,
        owner_id: int,
        *,
        now_ts: float,
        horizon_seconds: float = UPCOMING_HORIZON_SECONDS,
    ) -> list[Task]:
        """Pending tasks of the owner that are due within [now, now + horizon]."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT *
                FROM tasks
                WHERE owner_id = ?
                  AND status = 'pending'
                  AND due_at IS NOT NULL
                  AND due_at >= ?
                  AND due_at <= ?
                ORDER BY due_at ASC
                """,
                (int(owner_id), float(now_ts), float(now_ts) + float(horizon_seconds)),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_task(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
        due_at: float | None = _UNSET,
        reminder_at: float | None = _UNSET,
        tags: list[str] | None = None,
        notes: str | None = None,
    ) -> Task | None:
        """
        Partial update. Returns the updated task, or None if it does not exist.

        due_at / reminder_at accept None to clear the value. Any assignment of
        reminder_at (including re-setting or clearing it) re-arms the reminder:
        reminder_sent goes back to 0 in the same statement.
        """
        fields: list[str] = []
        params: list[Any] = []

        if title is not None:
            if not title.strip():
                raise ValueError("title must not be blank")
            fields.append("title = ?")
            params.append(title.strip())

        if description is not None:
            fields.append("description = ?")
            params.append(description)

        if priority is not None:
            fields.append("priority = ?")
            params.append(TaskPriority(priority).value)

        if status is not None:
            fields.append("status = ?")
            params.append(TaskStatus(status).value)

        if due_at is not _UNSET:
            fields.append("due_at = ?")
            params.append(None if due_at is None else float(due_at))

        if reminder_at is not _UNSET:
            fields.append("reminder_at = ?")
            params.append(None if reminder_at is None else float(reminder_at))
            fields.append("reminder_sent = 0")

        if tags is not None:
            fields.append("tags = ?")
            params.append(self._tags_to_str(tags))

        if notes is not None:
            fields.append("notes = ?")
            params.append(notes)

        if fields:
            fields.append("updated_at = ?")
            params.append(time.time())
            params.append(int(task_id))

            conn = self._get_conn()
            try:
                conn.execute(f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?", params)
                conn.commit()
            finally:
                conn.close()

        return self.get_task(task_id)

    def delete_task(self, task_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    # ---- reminder scanner API ----

    def find_due_reminders(
        self,
        *,
        now_ts: float,
        window_end_ts: float,
        limit: int | None = None,
    ) -> list[Task]:
        """
        Return pending, not-yet-notified tasks whose reminder falls in
        [now_ts, window_end_ts] (both ends inclusive).
        """
        sql = """
            SELECT *
            FROM tasks
            WHERE status = 'pending'
              AND reminder_sent = 0
              AND reminder_at IS NOT NULL
              AND reminder_at >= ?
              AND reminder_at <= ?
            ORDER BY reminder_at ASC, id ASC
        """
        params: list[Any] = [float(now_ts), float(window_end_ts)]
        if limit:
            sql += " LIMIT ?"
            params.append(int(limit))

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def mark_reminder_sent(self, task_id: int, *, reminder_at: float) -> bool:
        """
        Atomically flip reminder_sent for the reminder that was actually delivered.

        The row only changes if it is still un-notified AND still points at the
        same reminder_at; a concurrent reschedule or a second marker wins nothing.
        Returns True if this caller changed the row.
        """
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """
                UPDATE tasks
                SET reminder_sent = 1, updated_at = ?
                WHERE id = ?
                  AND reminder_sent = 0
                  AND reminder_at = ?
                """,
                (time.time(), int(task_id), float(reminder_at)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
