"""Key-value settings stored in the database, including the target task."""

from __future__ import annotations

import re
import sqlite3

from tasktrack.errors import DatabaseError, InvalidStatusError

TARGET_KEY = "target_id"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def get_config(conn: sqlite3.Connection, key: str) -> str | None:
    """Return the value stored under ``key``, or None if it is unset."""
    try:
        row = conn.execute("SELECT value FROM config WHERE key = ?", (key,)).fetchone()
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc
    return None if row is None else row[0]


def set_config(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Store ``value`` under ``key``, replacing any earlier value."""
    try:
        conn.execute(
            "INSERT INTO config (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def delete_config(conn: sqlite3.Connection, key: str) -> None:
    """Remove ``key``; removing a missing key is not an error."""
    try:
        conn.execute("DELETE FROM config WHERE key = ?", (key,))
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def get_target(conn: sqlite3.Connection) -> int | None:
    """Return the id of the target task, or None if no target is set."""
    value = get_config(conn, TARGET_KEY)
    if value is None:
        return None
    if not _INTEGER.fullmatch(value):
        raise InvalidStatusError("Invalid target ID format")
    target = int(value)
    if not -(2**63) <= target < 2**63:
        raise InvalidStatusError("Invalid target ID format")
    return target


def set_target(conn: sqlite3.Connection, target_id: int) -> None:
    """Make ``target_id`` the target task."""
    set_config(conn, TARGET_KEY, str(target_id))


def clear_target(conn: sqlite3.Connection) -> None:
    """Forget the target task."""
    delete_config(conn, TARGET_KEY)