"""Errors raised by the task tracker."""

from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import Decimal


def _format_ids(ids: Iterable[int]) -> str:
    return "[" + ", ".join(str(i) for i in ids) + "]"


def _format_float(value: float) -> str:
    """Render a float in plain decimal notation, dropping a trailing ``.0``."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class TtError(Exception):
    """Base class of every error the tracker raises."""

    code = "TtError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TaskNotFoundError(TtError):
    code = "TaskNotFound"

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task #{task_id} not found")
        self.task_id = task_id


class TaskNotPendingError(TtError):
    code = "TaskNotPending"

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task #{task_id} is not pending, cannot start")
        self.task_id = task_id


class AnotherTaskActiveError(TtError):
    code = "AnotherTaskActive"

    def __init__(self, task_id: int, title: str) -> None:
        super().__init__(
            f"Task #{task_id} ({title}) is already in progress. "
            "Finish or stop it first."
        )
        self.task_id = task_id
        self.title = title


class NoActiveTaskError(TtError):
    code = "NoActiveTask"

    def __init__(self) -> None:
        super().__init__("No task is currently in progress")


class UnmetDependenciesError(TtError):
    code = "UnmetDependencies"

    def __init__(self, task_id: int, pending: Iterable[int]) -> None:
        self.task_id = task_id
        self.pending = list(pending)
        super().__init__(
            f"Cannot start #{task_id}: dependencies not completed: "
            f"{_format_ids(self.pending)}"
        )


class CycleDetectedError(TtError):
    code = "CycleDetected"

    def __init__(self, task_id: int, depends_on: int, cycle: Iterable[int]) -> None:
        self.task_id = task_id
        self.depends_on = depends_on
        self.cycle = list(cycle)
        super().__init__(
            f"Adding #{task_id} -> #{depends_on} would create a cycle: "
            f"{_format_ids(self.cycle)}"
        )


class NoTargetError(TtError):
    code = "NoTarget"

    def __init__(self) -> None:
        super().__init__("No target set. Use `tt target <id>` first.")


class TargetReachedError(TtError):
    code = "TargetReached"

    def __init__(self, target_id: int) -> None:
        super().__init__(
            f"Target reached. All tasks for #{target_id} are completed."
        )
        self.target_id = target_id


class NoDodError(TtError):
    code = "NoDod"

    def __init__(self, task_id: int) -> None:
        super().__init__(
            f"Task #{task_id} has no definition of done. "
            f"Set one with `tt edit {task_id} --dod`"
        )
        self.task_id = task_id


class OrderConflictError(TtError):
    """A task is ordered before one of its dependencies (a warning)."""

    code = "OrderConflict"

    def __init__(
        self, task_id: int, task_order: float, depends_on: int, depends_on_order: float
    ) -> None:
        super().__init__(
            f"Warning: #{task_id} (order {_format_float(task_order)}) depends on "
            f"#{depends_on} (order {_format_float(depends_on_order)}) "
            "which has higher manual_order"
        )
        self.task_id = task_id
        self.task_order = task_order
        self.depends_on = depends_on
        self.depends_on_order = depends_on_order


class InvalidStatusError(TtError):
    code = "InvalidStatus"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid status: {detail}")
        self.detail = detail


class AllBlockedError(TtError):
    code = "AllBlocked"

    def __init__(self, blocked: Iterable[int]) -> None:
        self.blocked = list(blocked)
        super().__init__(
            f"All remaining tasks are blocked: {_format_ids(self.blocked)}"
        )


class DatabaseError(TtError):
    code = "DatabaseError"

    def __init__(self, cause: object) -> None:
        super().__init__(f"Database error: {cause}")
        self.cause = cause


class StorageIOError(TtError):
    code = "IoError"

    def __init__(self, cause: object) -> None:
        super().__init__(f"IO error: {cause}")
        self.cause = cause


class JsonRpcCallError(TtError):
    code = "JsonRpcError"

    def __init__(self, detail: str) -> None:
        super().__init__(f"JSON-RPC error: {detail}")
        self.detail = detail


class NotSupportedError(TtError):
    code = "NotSupported"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Not supported: {detail}")
        self.detail = detail


class FloatPrecisionExhaustedError(TtError):
    code = "FloatPrecisionExhausted"

    def __init__(self) -> None:
        super().__init__(
            "Float precision exhausted. Run `tt reindex` to reset ordering."
        )


class McpFailure(TtError):
    code = "McpError"

    def __init__(self, detail: str) -> None:
        super().__init__(f"MCP error: {detail}")
        self.detail = detail


class InvalidArgumentError(TtError):
    code = "InvalidArgument"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid argument: {detail}")
        self.detail = detail