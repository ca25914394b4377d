# tasktrack

Storage for a small task tracker that keeps tasks in SQLite and links
them by dependency edges. Each task has a title, a description, a
definition of done, a status and a manual sort order. Artifacts are
files recorded against a task. A key-value config table holds the
current target task.

The package has three parts:

- `tasktrack.errors`: the error hierarchy. Every error derives from
  `TtError` and carries a `code` string such as `"TaskNotFound"`.
- `tasktrack.db`: the schema (`schema`), connection helpers
  (`connection`) and the operations on tasks (`tasks`), dependencies
  (`dependencies`), artifacts (`artifacts`) and config (`config`).
- `tasktrack.mcp.transport`: JSON-RPC 2.0 request and response objects,
  the `McpResponse` tool-outcome type and a line-oriented `StdioTransport`.

The package depends on nothing outside the standard library.

## Installing

```
pip install .
```

With the test requirements:

```
pip install .[test]
```

## Storage

```python
from tasktrack.db.connection import open_memory_db, init_schema
from tasktrack.db import tasks, dependencies, config

conn = open_memory_db()
init_schema(conn)

design = tasks.create_task(conn, "Design", "Sketch the API", "Doc reviewed", 10.0)
build = tasks.create_task(conn, "Build", "Write the code", "Tests pass", 20.0)
dependencies.add_dependency(conn, build.id, design.id)

config.set_target(conn, build.id)
print(dependencies.get_incomplete_dependencies(conn, build.id))  # [1]

tasks.start_task(conn, design.id)
tasks.complete_task(conn, design.id)
print(tasks.get_task(conn, design.id, False).status)  # completed
```

`open_db(path)` opens a database file instead; both helpers turn on
foreign-key enforcement. `is_initialized(conn)` tells whether the schema
exists.

What the schema enforces:

- a task's status is one of `pending`, `in_progress`, `completed`,
  `blocked`, `cancelled`, `split` (`TaskStatus`);
- only one task can be `in_progress` at a time;
- a task cannot depend on itself, and both ends of a dependency must
  exist;
- any update to a task refreshes its `last_touched_at`.

Task lists are ordered by `manual_order`. `soft_delete_task` and
`archive_completed_tasks` mark tasks deleted; such tasks appear only in
`get_archived_tasks` and in `get_task(conn, id, True)`. The paginated
list functions take optional `limit` and `offset`.

Updating a task that does not exist raises `TaskNotFoundError`.
Removing a missing dependency or artifact raises `NotSupportedError`.
Any SQLite failure, such as a constraint violation, is raised as
`DatabaseError`.

## JSON-RPC transport

`StdioTransport` reads one JSON-RPC request per line and writes one
compact JSON response per line. It uses standard input and output by
default and accepts any text streams:

```python
import io
from tasktrack.mcp.transport import StdioTransport, JsonRpcResponse

out = io.StringIO()
transport = StdioTransport(io.StringIO('{"jsonrpc":"2.0","id":1,"method":"ping"}\n'), out)
request = transport.read_request()
transport.send_response(JsonRpcResponse.success(request.id, {"pong": True}))
print(out.getvalue())  # {"jsonrpc":"2.0","id":1,"result":{"pong":true}}
```

`read_request` returns `None` at end of input or on a blank line, and
raises `McpError` on malformed JSON or a version other than `"2.0"`.

`send_mcp_response(request_id, response)` sends an `McpResponse`: a
success goes out as a result of the form `{"status": "ok", "data": ...}`;
an error goes out as a JSON-RPC error whose code comes from
`jsonrpc_code_for` (for example `-32001` for `TaskNotFound`, `-32000`
for codes without their own number). `McpResponse.from_error` builds an
error response from any `TtError`.

## What this package does not do

- It has no command-line program and installs no commands.
- It has no server loop and no tool handlers: the transport reads and
  writes messages, but nothing here dispatches `initialize`,
  `tools/list` or `tools/call` requests.
- It has no scheduling logic on top of storage. Cycle detection,
  checking dependencies before a task starts, picking the next task,
  splitting tasks and reordering are not implemented; errors such as
  `CycleDetectedError` and `UnmetDependenciesError` are defined but
  nothing in the package raises them.

## Running the tests

```
pytest
```