"""Opening SQLite connections and setting up the schema."""

from __future__ import annotations

import os
import sqlite3

from tasktrack.db.schema import CHECK_SCHEMA_SQL, CREATE_SCHEMA_SQL
from tasktrack.errors import DatabaseError


def _connect(target: str) -> sqlite3.Connection:
    try:
        conn = sqlite3.connect(target, isolation_level=None)
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc
    try:
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        conn.close()
        raise DatabaseError(exc) from exc
    return conn


def open_db(path: str | os.PathLike[str]) -> sqlite3.Connection:
    """Open the database file at ``path`` with foreign keys enforced."""
    return _connect(os.fspath(path))


def open_memory_db() -> sqlite3.Connection:
    """Open a fresh in-memory database with foreign keys enforced."""
    return _connect(":memory:")


def init_schema(conn: sqlite3.Connection) -> None:
    """Create all tables, indexes and triggers if they are missing."""
    try:
        conn.executescript(CREATE_SCHEMA_SQL)
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def is_initialized(conn: sqlite3.Connection) -> bool:
    """Tell whether the schema has been created in this database."""
    try:
        return conn.execute(CHECK_SCHEMA_SQL).fetchone() is not None
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc