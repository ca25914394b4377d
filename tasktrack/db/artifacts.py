"""Storage of artifacts: files recorded against a task."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tasktrack.errors import DatabaseError, NotSupportedError

_COLUMNS = "id, task_id, name, file_path, created_at"


@dataclass
class Artifact:
    """A named file linked to a task."""

    id: int
    task_id: int
    name: str
    file_path: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Return the artifact as a JSON-ready mapping."""
        return {
            "id": self.id,
            "task_id": self.task_id,
            "name": self.name,
            "file_path": self.file_path,
            "created_at": self.created_at,
        }


def _row_to_artifact(row: Sequence[Any]) -> Artifact:
    return Artifact(
        id=row[0], task_id=row[1], name=row[2], file_path=row[3], created_at=row[4]
    )


def _execute(
    conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()
) -> sqlite3.Cursor:
    try:
        return conn.execute(sql, params)
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def create_artifact(
    conn: sqlite3.Connection, task_id: int, name: str, file_path: str
) -> Artifact:
    """Record an artifact for ``task_id`` and return it."""
    cursor = _execute(
        conn,
        "INSERT INTO artifacts (task_id, name, file_path) VALUES (?, ?, ?)",
        (task_id, name, file_path),
    )
    artifact = get_artifact(conn, cursor.lastrowid)
    if artifact is None:
        raise NotSupportedError("Failed to retrieve created artifact")
    return artifact


def get_artifact(conn: sqlite3.Connection, artifact_id: int) -> Artifact | None:
    """Return the artifact with ``artifact_id``, or None."""
    cursor = _execute(
        conn, f"SELECT {_COLUMNS} FROM artifacts WHERE id = ?", (artifact_id,)
    )
    try:
        row = cursor.fetchone()
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc
    return None if row is None else _row_to_artifact(row)


def get_artifacts_for_task(conn: sqlite3.Connection, task_id: int) -> list[Artifact]:
    """Return the artifacts of ``task_id`` in order of creation."""
    cursor = _execute(
        conn,
        f"SELECT {_COLUMNS} FROM artifacts WHERE task_id = ? ORDER BY created_at, id",
        (task_id,),
    )
    try:
        rows = cursor.fetchall()
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc
    return [_row_to_artifact(row) for row in rows]


def delete_artifact(conn: sqlite3.Connection, artifact_id: int) -> None:
    """Delete the artifact; raise if it does not exist."""
    cursor = _execute(conn, "DELETE FROM artifacts WHERE id = ?", (artifact_id,))
    if cursor.rowcount == 0:
        raise NotSupportedError("Artifact not found")