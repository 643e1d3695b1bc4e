# tests/test_task_store.py

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

import pytest

from tasker.tasks.task_models import Task
from tasker.tasks.task_store import TaskDecodeError, TaskStore, TaskStoreError


def test_list_on_empty_store_is_empty(store: TaskStore) -> None:
    assert store.list_tasks() == []
    assert store.count_tasks() == 0


@pytest.mark.parametrize(
    "description",
    ["Buy groceries", "  padded  ", "ünïcödé ✓", "x" * 5000, "line one\nline two", "-dash"],
)
def test_add_then_list_returns_task_verbatim(store: TaskStore, description: str) -> None:
    task_id = store.add_task(description)

    tasks = store.list_tasks()
    assert tasks == [Task(id=task_id, description=description, completed=False)]


def test_scenario_add_first_task_gets_id_1(store: TaskStore) -> None:
    assert store.add_task("Buy groceries") == 1
    assert store.list_tasks() == [Task(1, "Buy groceries", False)]


def test_scenario_complete_one_of_two(store: TaskStore) -> None:
    assert store.add_task("A") == 1
    assert store.add_task("B") == 2

    assert store.complete_task(1) == 1

    assert store.list_tasks() == [Task(1, "A", True), Task(2, "B", False)]


def test_complete_is_idempotent(store: TaskStore) -> None:
    task_id = store.add_task("Write report")

    assert store.complete_task(task_id) == 1
    before = store.list_tasks()
    assert store.complete_task(task_id) == 1
    assert store.list_tasks() == before
    assert before[0].completed is True


def test_missing_ids_affect_nothing(store: TaskStore) -> None:
    store.add_task("only one")

    assert store.complete_task(9999) == 0
    assert store.delete_task(9999) == 0
    assert store.list_tasks() == [Task(1, "only one", False)]


def test_scenario_delete_on_empty_store(store: TaskStore) -> None:
    assert store.delete_task(0) == 0


def test_delete_removes_exactly_one(store: TaskStore) -> None:
    ids = [store.add_task(d) for d in ("a", "b", "c")]

    assert store.delete_task(ids[1]) == 1

    remaining = store.list_tasks()
    assert [t.id for t in remaining] == [ids[0], ids[2]]
    assert store.count_tasks() == 2


def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    store.add_task("first")
    second = store.add_task("second")
    store.delete_task(second)

    assert store.add_task("third") == second + 1


def test_file_store_persists_across_reopen(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "tasks.db"

    with TaskStore(db) as first:
        first.add_task("survives restart")
        first.complete_task(1)

    assert db.exists()

    # Schema setup must be safe on an existing database.
    with TaskStore(db) as second:
        assert second.list_tasks() == [Task(1, "survives restart", True)]
        assert second.add_task("next") == 2


def test_schema_has_expected_columns(file_store: TaskStore) -> None:
    conn = sqlite3.connect(file_store.db_path)
    try:
        cols = {row[1]: row for row in conn.execute("PRAGMA table_info(tasks)")}
    finally:
        conn.close()

    assert set(cols) == {"id", "description", "completed"}
    assert cols["id"][5] == 1  # primary key
    assert cols["description"][3] == 1  # NOT NULL
    assert cols["completed"][3] == 1  # NOT NULL


def test_undecodable_row_raises(store: TaskStore) -> None:
    store._get_conn().execute(
        "INSERT INTO tasks (description, completed) VALUES (?, ?)", ("bad", "maybe")
    )

    with pytest.raises(TaskDecodeError):
        store.list_tasks()


def test_not_a_database_propagates_sqlite_error(tmp_path: Path) -> None:
    db = tmp_path / "tasks.db"
    db.write_bytes(b"this is not an sqlite database " * 64)

    with pytest.raises(sqlite3.DatabaseError):
        TaskStore(db)


def test_closed_store_rejects_operations(tmp_path: Path) -> None:
    s = TaskStore(tmp_path / "tasks.db")
    s.close()
    s.close()

    with pytest.raises(TaskStoreError):
        s.list_tasks()


def test_ready_log_names_the_database(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="tasker.tasks.task_store"):
        with TaskStore(":memory:"):
            pass

    messages = [r.getMessage() for r in caplog.records]
    assert "TaskStore ready db=:memory:" in messages
    assert "TaskStore closed db=:memory:" in messages
