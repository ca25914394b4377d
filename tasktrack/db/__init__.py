"""SQLite schema, connections and operations for tasks, dependencies, artifacts and config."""