"""Storage and retrieval of tasks."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tasktrack.errors import DatabaseError, InvalidStatusError, TaskNotFoundError

_COLUMNS = (
    "id, title, description, dod, status, manual_order, "
    "created_at, started_at, completed_at, last_touched_at, deleted"
)
_NOW = "strftime('%Y-%m-%dT%H:%M:%S', 'now')"


class TaskStatus(str, Enum):
    """Lifecycle state of a task, as stored in the database."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"
    SPLIT = "split"

    @classmethod
    def parse(cls, value: str) -> TaskStatus:
        """Return the status stored as ``value``."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(value) from None

    def __str__(self) -> str:
        return self.value


@dataclass
class Task:
    """One task row."""

    id: int
    title: str
    description: str | None
    dod: str | None
    status: TaskStatus
    manual_order: float
    created_at: str
    started_at: str | None
    completed_at: str | None
    last_touched_at: str
    deleted: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the task as a JSON-ready mapping."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dod": self.dod,
            "status": self.status.value,
            "manual_order": self.manual_order,
            "created_at": self.created_at,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "last_touched_at": self.last_touched_at,
            "deleted": self.deleted,
        }


def _row_to_task(row: Sequence[Any]) -> Task:
    try:
        status = TaskStatus.parse(row[4])
    except InvalidStatusError as exc:
        raise DatabaseError(exc) from exc
    return Task(
        id=row[0],
        title=row[1],
        description=row[2],
        dod=row[3],
        status=status,
        manual_order=float(row[5]),
        created_at=row[6],
        started_at=row[7],
        completed_at=row[8],
        last_touched_at=row[9],
        deleted=row[10] != 0,
    )


def _execute(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
    try:
        return conn.execute(sql, params)
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def _fetch_tasks(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> list[Task]:
    cursor = _execute(conn, sql, params)
    try:
        rows = cursor.fetchall()
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc
    return [_row_to_task(row) for row in rows]


def _fetch_one(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> Task | None:
    cursor = _execute(conn, sql, params)
    try:
        row = cursor.fetchone()
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc
    return None if row is None else _row_to_task(row)


def _paging(limit: int | None, offset: int | None) -> str:
    clause = ""
    for keyword, value in (("LIMIT", limit), ("OFFSET", offset)):
        if value is None:
            continue
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f"{keyword.lower()} must be a non-negative integer")
        clause += f" {keyword} {value}"
    return clause


def _update(conn: sqlite3.Connection, task_id: int, sql: str, params: Sequence[Any]) -> None:
    if _execute(conn, sql, params).rowcount == 0:
        raise TaskNotFoundError(task_id)


def create_task(
    conn: sqlite3.Connection,
    title: str,
    description: str,
    dod: str,
    manual_order: float,
) -> Task:
    """Insert a pending task and return it."""
    cursor = _execute(
        conn,
        "INSERT INTO tasks (title, description, dod, status, manual_order) "
        "VALUES (?, ?, ?, 'pending', ?)",
        (title, description, dod, manual_order),
    )
    task_id = cursor.lastrowid
    task = get_task(conn, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def get_task(
    conn: sqlite3.Connection, task_id: int, include_archived: bool = False
) -> Task | None:
    """Return the task with ``task_id``; archived tasks only on request."""
    sql = f"SELECT {_COLUMNS} FROM tasks WHERE id = ?"
    if not include_archived:
        sql += " AND deleted = 0"
    return _fetch_one(conn, sql, (task_id,))


def get_all_tasks(conn: sqlite3.Connection) -> list[Task]:
    """Return every live task ordered by manual order."""
    return _fetch_tasks(
        conn, f"SELECT {_COLUMNS} FROM tasks WHERE deleted = 0 ORDER BY manual_order"
    )


def get_tasks_by_status(
    conn: sqlite3.Connection,
    status: TaskStatus,
    limit: int | None = None,
    offset: int | None = None,
) -> list[Task]:
    """Return live tasks in ``status`` ordered by manual order."""
    status = TaskStatus(status)
    sql = (
        f"SELECT {_COLUMNS} FROM tasks WHERE status = ? AND deleted = 0 "
        f"ORDER BY manual_order{_paging(limit, offset)}"
    )
    return _fetch_tasks(conn, sql, (status.value,))


def get_active_tasks(
    conn: sqlite3.Connection, limit: int | None = None, offset: int | None = None
) -> list[Task]:
    """Return live pending and in-progress tasks ordered by manual order."""
    sql = (
        f"SELECT {_COLUMNS} FROM tasks WHERE status IN ('pending', 'in_progress') "
        f"AND deleted = 0 ORDER BY manual_order{_paging(limit, offset)}"
    )
    return _fetch_tasks(conn, sql)


def get_all_tasks_paginated(
    conn: sqlite3.Connection, limit: int | None = None, offset: int | None = None
) -> list[Task]:
    """Return live tasks ordered by manual order, one page at a time."""
    sql = (
        f"SELECT {_COLUMNS} FROM tasks WHERE deleted = 0 "
        f"ORDER BY manual_order{_paging(limit, offset)}"
    )
    return _fetch_tasks(conn, sql)


def get_active_task(conn: sqlite3.Connection) -> Task | None:
    """Return the live task in progress, if any."""
    return _fetch_one(
        conn,
        f"SELECT {_COLUMNS} FROM tasks WHERE status = 'in_progress' AND deleted = 0 LIMIT 1",
    )


def update_task_title(conn: sqlite3.Connection, task_id: int, title: str) -> None:
    _update(conn, task_id, "UPDATE tasks SET title = ? WHERE id = ?", (title, task_id))


def update_task_description(
    conn: sqlite3.Connection, task_id: int, description: str | None
) -> None:
    _update(
        conn, task_id, "UPDATE tasks SET description = ? WHERE id = ?", (description, task_id)
    )


def update_task_dod(conn: sqlite3.Connection, task_id: int, dod: str | None) -> None:
    _update(conn, task_id, "UPDATE tasks SET dod = ? WHERE id = ?", (dod, task_id))


def update_task_status(conn: sqlite3.Connection, task_id: int, status: TaskStatus) -> None:
    status = TaskStatus(status)
    _update(conn, task_id, "UPDATE tasks SET status = ? WHERE id = ?", (status.value, task_id))


def update_task_order(conn: sqlite3.Connection, task_id: int, manual_order: float) -> None:
    _update(
        conn, task_id, "UPDATE tasks SET manual_order = ? WHERE id = ?", (manual_order, task_id)
    )


def start_task(conn: sqlite3.Connection, task_id: int) -> None:
    """Mark the task in progress and stamp its start time."""
    _update(
        conn,
        task_id,
        f"UPDATE tasks SET status = 'in_progress', started_at = {_NOW} WHERE id = ?",
        (task_id,),
    )


def stop_task(conn: sqlite3.Connection, task_id: int) -> None:
    """Return the task to pending; its start time is kept."""
    _update(conn, task_id, "UPDATE tasks SET status = 'pending' WHERE id = ?", (task_id,))


def complete_task(conn: sqlite3.Connection, task_id: int) -> None:
    """Mark the task completed and stamp its completion time."""
    _update(
        conn,
        task_id,
        f"UPDATE tasks SET status = 'completed', completed_at = {_NOW} WHERE id = ?",
        (task_id,),
    )


def cancel_task(conn: sqlite3.Connection, task_id: int) -> None:
    _update(conn, task_id, "UPDATE tasks SET status = 'cancelled' WHERE id = ?", (task_id,))


def block_task(conn: sqlite3.Connection, task_id: int) -> None:
    _update(conn, task_id, "UPDATE tasks SET status = 'blocked' WHERE id = ?", (task_id,))


def unblock_task(conn: sqlite3.Connection, task_id: int) -> None:
    _update(conn, task_id, "UPDATE tasks SET status = 'pending' WHERE id = ?", (task_id,))


def soft_delete_task(conn: sqlite3.Connection, task_id: int) -> None:
    """Hide the task by marking it deleted."""
    _update(conn, task_id, "UPDATE tasks SET deleted = 1 WHERE id = ?", (task_id,))


def archive_completed_tasks(conn: sqlite3.Connection) -> int:
    """Mark every completed or cancelled task deleted; return how many rows changed."""
    cursor = _execute(
        conn, "UPDATE tasks SET deleted = 1 WHERE status IN ('completed', 'cancelled')"
    )
    return cursor.rowcount


def get_archived_tasks(
    conn: sqlite3.Connection, limit: int | None = None, offset: int | None = None
) -> list[Task]:
    """Return archived tasks ordered by manual order."""
    sql = (
        f"SELECT {_COLUMNS} FROM tasks WHERE deleted = 1 "
        f"ORDER BY manual_order{_paging(limit, offset)}"
    )
    return _fetch_tasks(conn, sql)