import pytest

from tasktrack.db.connection import init_schema, open_memory_db
from tasktrack.db.tasks import (
    Task,
    TaskStatus,
    archive_completed_tasks,
    block_task,
    cancel_task,
    complete_task,
    create_task,
    get_active_task,
    get_active_tasks,
    get_all_tasks,
    get_all_tasks_paginated,
    get_archived_tasks,
    get_task,
    get_tasks_by_status,
    soft_delete_task,
    start_task,
    stop_task,
    unblock_task,
    update_task_description,
    update_task_dod,
    update_task_order,
    update_task_status,
    update_task_title,
)
from tasktrack.errors import DatabaseError, InvalidStatusError, TaskNotFoundError


@pytest.fixture
def conn():
    connection = open_memory_db()
    init_schema(connection)
    yield connection
    connection.close()


def test_create_task(conn):
    task = create_task(conn, "Test Task", "", "", 10.0)
    assert task.title == "Test Task"
    assert task.status == TaskStatus.PENDING
    assert task.manual_order == 10.0
    assert task.id > 0


def test_create_task_with_description(conn):
    task = create_task(conn, "Test", "Description", "DoD", 10.0)
    assert task.description == "Description"
    assert task.dod == "DoD"


def test_get_task(conn):
    created = create_task(conn, "Test", "", "", 10.0)
    fetched = get_task(conn, created.id, False)
    assert fetched is not None
    assert fetched.title == "Test"


def test_get_task_not_found(conn):
    assert get_task(conn, 999, False) is None


def test_get_all_tasks(conn):
    create_task(conn, "Task A", "", "", 20.0)
    create_task(conn, "Task B", "", "", 10.0)
    tasks = get_all_tasks(conn)
    assert [t.title for t in tasks] == ["Task B", "Task A"]


def test_get_tasks_by_status(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    start_task(conn, task.id)
    assert len(get_tasks_by_status(conn, TaskStatus.IN_PROGRESS, None, None)) == 1
    assert len(get_tasks_by_status(conn, TaskStatus.PENDING, None, None)) == 0


def test_get_active_task(conn):
    assert get_active_task(conn) is None
    task = create_task(conn, "Test", "", "", 10.0)
    start_task(conn, task.id)
    active = get_active_task(conn)
    assert active is not None
    assert active.id == task.id


def test_update_task_title(conn):
    task = create_task(conn, "Old", "", "", 10.0)
    update_task_title(conn, task.id, "New")
    assert get_task(conn, task.id, False).title == "New"


def test_update_task_not_found(conn):
    with pytest.raises(TaskNotFoundError) as info:
        update_task_title(conn, 999, "New")
    assert info.value.task_id == 999
    assert str(info.value) == "Task #999 not found"


@pytest.mark.parametrize(
    "action",
    [
        lambda c: update_task_description(c, 999, "x"),
        lambda c: update_task_dod(c, 999, "x"),
        lambda c: update_task_status(c, 999, TaskStatus.BLOCKED),
        lambda c: update_task_order(c, 999, 1.0),
        lambda c: start_task(c, 999),
        lambda c: stop_task(c, 999),
        lambda c: complete_task(c, 999),
        lambda c: cancel_task(c, 999),
        lambda c: block_task(c, 999),
        lambda c: unblock_task(c, 999),
        lambda c: soft_delete_task(c, 999),
    ],
)
def test_updates_on_missing_task_raise(conn, action):
    with pytest.raises(TaskNotFoundError):
        action(conn)


def test_start_stop_complete_task(conn):
    task = create_task(conn, "Test", "", "", 10.0)

    start_task(conn, task.id)
    started = get_task(conn, task.id, False)
    assert started.status == TaskStatus.IN_PROGRESS
    assert started.started_at is not None

    stop_task(conn, task.id)
    stopped = get_task(conn, task.id, False)
    assert stopped.status == TaskStatus.PENDING
    assert stopped.started_at is not None

    start_task(conn, task.id)
    complete_task(conn, task.id)
    completed = get_task(conn, task.id, False)
    assert completed.status == TaskStatus.COMPLETED
    assert completed.completed_at is not None


def test_block_unblock_task(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    block_task(conn, task.id)
    assert get_task(conn, task.id, False).status == TaskStatus.BLOCKED
    unblock_task(conn, task.id)
    assert get_task(conn, task.id, False).status == TaskStatus.PENDING


def test_cancel_task(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    cancel_task(conn, task.id)
    assert get_task(conn, task.id, False).status == TaskStatus.CANCELLED


def test_update_task_order(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    update_task_order(conn, task.id, 50.0)
    assert get_task(conn, task.id, False).manual_order == 50.0


def test_update_description_dod_and_status(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    update_task_description(conn, task.id, "More")
    update_task_dod(conn, task.id, "Done when done")
    update_task_status(conn, task.id, TaskStatus.SPLIT)
    updated = get_task(conn, task.id, False)
    assert (updated.description, updated.dod, updated.status) == (
        "More",
        "Done when done",
        TaskStatus.SPLIT,
    )


def test_update_description_to_none_violates_not_null(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    with pytest.raises(DatabaseError):
        update_task_description(conn, task.id, None)


def test_second_in_progress_rejected(conn):
    first = create_task(conn, "One", "", "", 10.0)
    second = create_task(conn, "Two", "", "", 20.0)
    start_task(conn, first.id)
    with pytest.raises(DatabaseError):
        start_task(conn, second.id)
    assert get_task(conn, second.id).status == TaskStatus.PENDING


def test_archive_completed_tasks(conn):
    pending = create_task(conn, "Pending", "", "", 10.0)
    completed = create_task(conn, "Completed", "", "", 20.0)
    another = create_task(conn, "Another", "", "", 30.0)
    complete_task(conn, completed.id)
    complete_task(conn, another.id)

    assert len(get_all_tasks(conn)) == 3
    assert archive_completed_tasks(conn) == 2

    assert len(get_archived_tasks(conn, None, None)) == 2
    remaining = get_all_tasks(conn)
    assert [t.id for t in remaining] == [pending.id]


def test_get_archived_tasks(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    soft_delete_task(conn, task.id)
    archived = get_archived_tasks(conn, None, None)
    assert [t.id for t in archived] == [task.id]
    assert archived[0].deleted is True


def test_get_task_by_id_includes_archived(conn):
    task = create_task(conn, "Test", "", "", 10.0)
    soft_delete_task(conn, task.id)
    found = get_task(conn, task.id, True)
    assert found is not None and found.id == task.id
    assert get_task(conn, task.id, False) is None


def test_get_active_tasks_filters_status(conn):
    a = create_task(conn, "A", "", "", 10.0)
    b = create_task(conn, "B", "", "", 20.0)
    c = create_task(conn, "C", "", "", 30.0)
    start_task(conn, b.id)
    block_task(conn, c.id)
    assert [t.id for t in get_active_tasks(conn)] == [a.id, b.id]


def test_pagination(conn):
    ids = [create_task(conn, f"T{n}", "", "", float(n)).id for n in range(5)]
    assert [t.id for t in get_all_tasks_paginated(conn, 2, None)] == ids[:2]
    assert [t.id for t in get_all_tasks_paginated(conn, 2, 2)] == ids[2:4]
    assert [t.id for t in get_tasks_by_status(conn, TaskStatus.PENDING, 1, 4)] == ids[4:]


def test_offset_without_limit_is_rejected(conn):
    create_task(conn, "T", "", "", 1.0)
    with pytest.raises(DatabaseError):
        get_all_tasks_paginated(conn, None, 1)


def test_negative_limit_rejected(conn):
    with pytest.raises(ValueError):
        get_active_tasks(conn, -1, None)


def test_status_parse():
    assert TaskStatus.parse("in_progress") is TaskStatus.IN_PROGRESS
    assert TaskStatus.parse("split") is TaskStatus.SPLIT
    with pytest.raises(InvalidStatusError):
        TaskStatus.parse("unknown")


def test_task_to_dict(conn):
    task = create_task(conn, "Test", "Desc", "DoD", 10.0)
    data = task.to_dict()
    assert data["title"] == "Test"
    assert data["status"] == "pending"
    assert data["deleted"] is False
    assert data["started_at"] is None
    assert isinstance(task, Task)
    assert set(data) == {
        "id",
        "title",
        "description",
        "dod",
        "status",
        "manual_order",
        "created_at",
        "started_at",
        "completed_at",
        "last_touched_at",
        "deleted",
    }