"""Storage of dependency edges between tasks."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tasktrack.errors import DatabaseError, NotSupportedError


@dataclass(frozen=True)
class Dependency:
    """An edge saying that ``task_id`` depends on ``depends_on``."""

    task_id: int
    depends_on: int


def _execute(
    conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()
) -> sqlite3.Cursor:
    try:
        return conn.execute(sql, params)
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def _fetch_all(
    conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()
) -> list[tuple[Any, ...]]:
    cursor = _execute(conn, sql, params)
    try:
        return cursor.fetchall()
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def _exists(conn: sqlite3.Connection, sql: str, params: Sequence[Any]) -> bool:
    rows = _fetch_all(conn, sql, params)
    return bool(rows[0][0])


def _edges(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> list[Dependency]:
    return [Dependency(task_id=row[0], depends_on=row[1]) for row in _fetch_all(conn, sql, params)]


def add_dependency(conn: sqlite3.Connection, task_id: int, depends_on: int) -> None:
    """Record that ``task_id`` depends on ``depends_on``."""
    _execute(
        conn,
        "INSERT INTO dependencies (task_id, depends_on) VALUES (?, ?)",
        (task_id, depends_on),
    )


def remove_dependency(conn: sqlite3.Connection, task_id: int, depends_on: int) -> None:
    """Remove the edge; raise if it does not exist."""
    cursor = _execute(
        conn,
        "DELETE FROM dependencies WHERE task_id = ? AND depends_on = ?",
        (task_id, depends_on),
    )
    if cursor.rowcount == 0:
        raise NotSupportedError("Dependency does not exist")


def get_dependencies(conn: sqlite3.Connection, task_id: int) -> list[Dependency]:
    """Return the edges from ``task_id`` to the tasks it depends on."""
    return _edges(
        conn,
        "SELECT task_id, depends_on FROM dependencies WHERE task_id = ?",
        (task_id,),
    )


def get_dependents(conn: sqlite3.Connection, depends_on: int) -> list[Dependency]:
    """Return the edges from tasks that depend on ``depends_on``."""
    return _edges(
        conn,
        "SELECT task_id, depends_on FROM dependencies WHERE depends_on = ?",
        (depends_on,),
    )


def get_all_dependencies(conn: sqlite3.Connection) -> list[Dependency]:
    """Return every dependency edge."""
    return _edges(conn, "SELECT task_id, depends_on FROM dependencies")


def has_dependencies(conn: sqlite3.Connection, task_id: int) -> bool:
    """Tell whether ``task_id`` depends on any task."""
    return _exists(
        conn,
        "SELECT EXISTS(SELECT 1 FROM dependencies WHERE task_id = ?)",
        (task_id,),
    )


def dependency_exists(conn: sqlite3.Connection, task_id: int, depends_on: int) -> bool:
    """Tell whether the edge ``task_id`` -> ``depends_on`` exists."""
    return _exists(
        conn,
        "SELECT EXISTS(SELECT 1 FROM dependencies WHERE task_id = ? AND depends_on = ?)",
        (task_id, depends_on),
    )


def get_incomplete_dependencies(conn: sqlite3.Connection, task_id: int) -> list[int]:
    """Return the ids of tasks ``task_id`` depends on that are not completed."""
    rows = _fetch_all(
        conn,
        "SELECT d.depends_on FROM dependencies d "
        "JOIN tasks t ON d.depends_on = t.id "
        "WHERE d.task_id = ? AND t.status != 'completed'",
        (task_id,),
    )
    return [row[0] for row in rows]