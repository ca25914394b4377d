import time

import pytest

from tasktrack.db.connection import (
    init_schema,
    is_initialized,
    open_db,
    open_memory_db,
)
from tasktrack.errors import DatabaseError


def test_open_memory_db():
    conn = open_memory_db()
    (mode,) = conn.execute("PRAGMA journal_mode").fetchone()
    assert mode == "memory"


def test_foreign_keys_enabled():
    conn = open_memory_db()
    (enabled,) = conn.execute("PRAGMA foreign_keys").fetchone()
    assert enabled == 1


def test_init_schema():
    conn = open_memory_db()
    assert is_initialized(conn) is False
    init_schema(conn)
    assert is_initialized(conn) is True


def test_open_db_file(tmp_path):
    db_path = tmp_path / "test.db"
    conn = open_db(db_path)
    conn.close()
    assert db_path.exists()


def test_open_db_in_missing_directory_raises(tmp_path):
    with pytest.raises(DatabaseError):
        open_db(tmp_path / "missing" / "test.db")


def test_file_db_basic_persistence(tmp_path):
    db_path = tmp_path / "test.db"
    conn = open_db(db_path)
    conn.execute("CREATE TABLE test (id INTEGER PRIMARY KEY, value TEXT)")
    conn.execute("INSERT INTO test (value) VALUES ('initial')")
    conn.close()

    conn = open_db(db_path)
    conn.execute("UPDATE test SET value = 'updated' WHERE id = 1")
    conn.close()

    conn = open_db(db_path)
    (value,) = conn.execute("SELECT value FROM test WHERE id = 1").fetchone()
    conn.close()
    assert value == "updated"


def test_file_db_trigger_side_effect(tmp_path):
    db_path = tmp_path / "test.db"
    conn = open_db(db_path)
    conn.executescript(
        """
        CREATE TABLE tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            last_touched_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
        );
        CREATE TRIGGER trg_tasks_touch_update
        AFTER UPDATE ON tasks
        BEGIN
            UPDATE tasks SET last_touched_at = strftime('%Y-%m-%dT%H:%M:%S', 'now') WHERE id = NEW.id;
        END;
        """
    )
    conn.execute("INSERT INTO tasks (title, status) VALUES ('Test', 'pending')")
    conn.close()

    conn = open_db(db_path)
    (initial,) = conn.execute(
        "SELECT last_touched_at FROM tasks WHERE id = 1"
    ).fetchone()
    conn.close()

    time.sleep(1.05)

    conn = open_db(db_path)
    conn.execute("UPDATE tasks SET status = 'in_progress' WHERE id = 1")
    conn.close()

    conn = open_db(db_path)
    final, status = conn.execute(
        "SELECT last_touched_at, status FROM tasks WHERE id = 1"
    ).fetchone()
    conn.close()

    assert initial != final
    assert status == "in_progress"