"""SQL that defines the tracker's database layout."""

TASK_STATUSES = ("pending", "in_progress", "completed", "blocked", "cancelled", "split")

_NOW = "strftime('%Y-%m-%dT%H:%M:%S', 'now')"
_STATUS_LIST = ", ".join(f"'{status}'" for status in TASK_STATUSES)

_TASKS_TABLE = f"""
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL, description TEXT NOT NULL, dod TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    manual_order REAL NOT NULL DEFAULT 0.0,
    created_at TEXT NOT NULL DEFAULT ({_NOW}),
    started_at TEXT, completed_at TEXT,
    last_touched_at TEXT NOT NULL DEFAULT ({_NOW}),
    deleted INTEGER NOT NULL DEFAULT 0 CHECK (deleted IN (0, 1)),
    CONSTRAINT chk_status CHECK (status IN ({_STATUS_LIST}))
);"""

_DEPENDENCIES_TABLE = """
CREATE TABLE IF NOT EXISTS dependencies (
    task_id INTEGER NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    depends_on INTEGER NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    PRIMARY KEY (task_id, depends_on),
    CONSTRAINT chk_no_self_dep CHECK (task_id != depends_on)
);"""

_ARTIFACTS_TABLE = f"""
CREATE TABLE IF NOT EXISTS artifacts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id INTEGER NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    name TEXT NOT NULL, file_path TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({_NOW})
);"""

_CONFIG_TABLE = """
CREATE TABLE IF NOT EXISTS config (key TEXT PRIMARY KEY, value TEXT NOT NULL);"""

_INDEXES = (
    ("idx_tasks_status", "tasks", "status"),
    ("idx_tasks_manual_order", "tasks", "manual_order"),
    ("idx_dependencies_task_id", "dependencies", "task_id"),
    ("idx_dependencies_depends_on", "dependencies", "depends_on"),
    ("idx_artifacts_task_id", "artifacts", "task_id"),
)

# Every modification refreshes last_touched_at.
_TOUCH_TRIGGER = f"""
CREATE TRIGGER IF NOT EXISTS trg_tasks_touch_update AFTER UPDATE ON tasks
BEGIN
    UPDATE tasks SET last_touched_at = {_NOW} WHERE id = NEW.id;
END;"""

# At most one task may be in progress at any time.
_SINGLE_ACTIVE_TRIGGER = """
CREATE TRIGGER IF NOT EXISTS trg_single_in_progress
BEFORE UPDATE OF status ON tasks WHEN NEW.status = 'in_progress'
BEGIN
    SELECT RAISE(ABORT, 'Cannot have more than one in_progress task')
    WHERE EXISTS (SELECT 1 FROM tasks WHERE status = 'in_progress' AND id != NEW.id);
END;"""

CREATE_SCHEMA_SQL = "\n".join(
    [
        "PRAGMA foreign_keys = ON;",
        _TASKS_TABLE,
        _DEPENDENCIES_TABLE,
        _ARTIFACTS_TABLE,
        _CONFIG_TABLE,
        *(
            f"CREATE INDEX IF NOT EXISTS {name} ON {table}({column});"
            for name, table, column in _INDEXES
        ),
        _TOUCH_TRIGGER,
        _SINGLE_ACTIVE_TRIGGER,
    ]
)

ENABLE_WAL_SQL = "PRAGMA journal_mode = WAL;"

CHECK_SCHEMA_SQL = "SELECT name FROM sqlite_master WHERE type='table' AND name='tasks'"