# src/tasker/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


class TaskStoreError(Exception):
    """Base class for errors raised by TaskStore itself (not by sqlite3)."""


class TaskDecodeError(TaskStoreError):
    """A stored row does not decode into a Task."""


class TaskStore:
    """
    SQLite task store.

    One table, four statements:
    - add_task       INSERT
    - list_tasks     SELECT
    - complete_task  UPDATE completed = 1
    - delete_task    DELETE

    Connection:
    - a single connection is held for the lifetime of the store
      (required for ":memory:" databases, which vanish with their connection)
    - every mutation commits immediately; there is no multi-statement transaction

    sqlite3 errors are not caught here; they propagate to the caller.
    """

    def __init__(self, db_path: str | Path = "tasks.db") -> None:
        self._db_path = str(db_path)
        if self._db_path != MEMORY_DB:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = sqlite3.connect(self._db_path)
        try:
            self._ensure_schema()
        except sqlite3.Error:
            self.close()
            raise
        logger.debug("TaskStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("TaskStore closed db=%s", self._db_path)

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise TaskStoreError(f"TaskStore for {self._db_path} is closed")
        return self._conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                description TEXT NOT NULL,
                completed BOOLEAN NOT NULL DEFAULT 0
            )
            """
        )
        conn.commit()

    @staticmethod
    def _row_to_task(row: tuple[object, ...]) -> Task:
        task_id, description, completed = row
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise TaskDecodeError(f"Invalid task id in row: {task_id!r}")
        if not isinstance(description, str):
            raise TaskDecodeError(f"Invalid description for task {task_id}: {description!r}")
        if completed not in (0, 1) or isinstance(completed, float):
            raise TaskDecodeError(f"Invalid completed flag for task {task_id}: {completed!r}")
        return Task(id=task_id, description=description, completed=bool(completed))

    # ---- public API ----

    def count_tasks(self) -> int:
        cur = self._get_conn().execute("SELECT COUNT(*) FROM tasks")
        (n,) = cur.fetchone()
        return int(n)

    def add_task(self, description: str) -> int:
        """Insert a new, not yet completed task and return its id."""
        conn = self._get_conn()
        cur = conn.execute(
            "INSERT INTO tasks (description, completed) VALUES (?, ?)",
            (description, False),
        )
        conn.commit()
        rowid = cur.lastrowid
        if rowid is None:
            raise TaskStoreError("SQLite did not return lastrowid for tasks insert")
        task_id = int(rowid)
        logger.info("Task added id=%s", task_id)
        return task_id

    def list_tasks(self) -> list[Task]:
        """All tasks in id order. Empty list when the table is empty."""
        cur = self._get_conn().execute(
            "SELECT id, description, completed FROM tasks ORDER BY id"
        )
        return [self._row_to_task(row) for row in cur.fetchall()]

    def complete_task(self, task_id: int) -> int:
        """
        Mark a task completed.

        Unconditional: an already completed task still matches and counts as 1.
        Returns the number of matched rows (0 or 1).
        """
        conn = self._get_conn()
        cur = conn.execute(
            "UPDATE tasks SET completed = ? WHERE id = ?",
            (True, int(task_id)),
        )
        conn.commit()
        logger.info("Task complete id=%s rows=%s", task_id, cur.rowcount)
        return cur.rowcount

    def delete_task(self, task_id: int) -> int:
        """Delete a task. Returns the number of deleted rows (0 or 1)."""
        conn = self._get_conn()
        cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
        conn.commit()
        logger.info("Task delete id=%s rows=%s", task_id, cur.rowcount)
        return cur.rowcount
