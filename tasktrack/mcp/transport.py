"""JSON-RPC 2.0 messages and the line-delimited stdio transport."""

from __future__ import annotations

import dataclasses
import json
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

from tasktrack.errors import TtError


class McpError(Exception):
    """Failure of the transport or protocol layer."""

    class Kind(Enum):
        IO = "io"
        JSON_RPC = "json_rpc"
        SERIALIZATION = "serialization"
        SHUTDOWN = "shutdown"
        DATABASE = "database"

    _PREFIXES = {
        Kind.IO: "IO error",
        Kind.JSON_RPC: "JSON-RPC error",
        Kind.SERIALIZATION: "Serialization error",
        Kind.DATABASE: "Database error",
    }

    def __init__(self, kind: McpError.Kind, detail: object = "") -> None:
        self.kind = kind
        self.detail = detail
        if kind is McpError.Kind.SHUTDOWN:
            text = "Shutdown requested"
        else:
            text = f"{self._PREFIXES[kind]}: {detail}"
        super().__init__(text)


_JSONRPC_CODES = {
    "TaskNotFound": -32001,
    "TaskNotPending": -32002,
    "AnotherTaskActive": -32003,
    "NoActiveTask": -32004,
    "UnmetDependencies": -32005,
    "NoDod": -32006,
    "NoTarget": -32007,
    "TargetReached": -32008,
    "AllBlocked": -32009,
    "CycleDetected": -32010,
    "InvalidStatus": -32011,
}

_GENERIC_JSONRPC_CODE = -32000

_MISSING: Any = object()


def error_code_for(error: TtError) -> str:
    """Return the programmatic error code for a tracker error."""
    return type(error).code


def jsonrpc_code_for(error_code: str) -> int:
    """Map a tracker error code onto a JSON-RPC error code."""
    return _JSONRPC_CODES.get(error_code, _GENERIC_JSONRPC_CODE)


def _to_json_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        if isinstance(value, Enum):
            return _to_json_value(value.value)
        return value
    if isinstance(value, Enum):
        return _to_json_value(value.value)
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _to_json_value(to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_json_value(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(key): _to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(item) for item in value]
    raise TypeError(f"cannot represent {type(value).__name__} as JSON")


@dataclass(frozen=True)
class McpResponse:
    """Outcome of a tool call: either data or an error code with a message."""

    data: Any = None
    error_code: str | None = None
    message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error_code is not None

    @classmethod
    def ok(cls, data: Any) -> McpResponse:
        """Build a success response holding ``data`` as JSON values."""
        return cls(data=_to_json_value(data))

    @classmethod
    def error(cls, code: str, message: str) -> McpResponse:
        """Build an error response."""
        return cls(error_code=code, message=message)

    @classmethod
    def from_error(cls, error: TtError) -> McpResponse:
        """Build an error response from a tracker error."""
        return cls(error_code=error_code_for(error), message=str(error))

    def to_dict(self) -> dict[str, Any]:
        if self.is_error:
            return {
                "status": "error",
                "error_code": self.error_code,
                "message": self.message,
            }
        return {"status": "ok", "data": self.data}


@dataclass
class JsonRpcRequest:
    """A JSON-RPC 2.0 request or notification."""

    jsonrpc: str
    method: str
    id: Any = None
    params: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> JsonRpcRequest:
        """Build a request from decoded JSON, rejecting malformed shapes."""
        if not isinstance(data, dict):
            raise McpError(McpError.Kind.SERIALIZATION, "request must be a JSON object")
        for key in ("jsonrpc", "method"):
            if key not in data:
                raise McpError(McpError.Kind.SERIALIZATION, f"missing field `{key}`")
            if not isinstance(data[key], str):
                raise McpError(
                    McpError.Kind.SERIALIZATION, f"field `{key}` must be a string"
                )
        return cls(
            jsonrpc=data["jsonrpc"],
            method=data["method"],
            id=data.get("id"),
            params=data.get("params"),
        )


@dataclass
class JsonRpcErrorObject:
    """The ``error`` member of a JSON-RPC response."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


@dataclass
class JsonRpcResponse:
    """A JSON-RPC 2.0 response carrying either a result or an error."""

    id: Any = None
    result: Any = field(default=_MISSING)
    error: JsonRpcErrorObject | None = None
    jsonrpc: str = "2.0"

    @classmethod
    def success(cls, request_id: Any, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, code: int, message: str) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcErrorObject(code=code, message=message))

    @property
    def has_result(self) -> bool:
        return self.result is not _MISSING

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.has_result:
            out["result"] = self.result
        if self.error is not None:
            out["error"] = self.error.to_dict()
        return out


class StdioTransport:
    """Reads one JSON-RPC request per line and writes one response per line."""

    def __init__(self, reader: TextIO | None = None, writer: TextIO | None = None) -> None:
        self.reader = reader if reader is not None else sys.stdin
        self.writer = writer if writer is not None else sys.stdout

    def read_request(self) -> JsonRpcRequest | None:
        """Return the next request, or None at end of input or on a blank line."""
        try:
            line = self.reader.readline()
        except OSError as exc:
            raise McpError(McpError.Kind.IO, exc) from exc
        if not line:
            return None
        line = line.strip()
        if not line:
            return None
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise McpError(McpError.Kind.SERIALIZATION, exc) from exc
        request = JsonRpcRequest.from_dict(payload)
        if request.jsonrpc != "2.0":
            raise McpError(
                McpError.Kind.JSON_RPC, "Invalid JSON-RPC version. Expected '2.0'"
            )
        return request

    def send_response(self, response: JsonRpcResponse) -> None:
        """Write ``response`` as one line of compact JSON and flush."""
        try:
            text = json.dumps(
                response.to_dict(),
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise McpError(McpError.Kind.SERIALIZATION, exc) from exc
        try:
            self.writer.write(text + "\n")
            self.writer.flush()
        except OSError as exc:
            raise McpError(McpError.Kind.IO, exc) from exc

    def send_mcp_response(self, request_id: Any, response: McpResponse) -> None:
        """Send a tool outcome: errors as JSON-RPC errors, data as a result."""
        body = response.to_dict()
        if body["status"] == "error":
            error_code = body.get("error_code") or "UnknownError"
            message = body.get("message") or "An unknown error occurred"
            self.send_response(
                JsonRpcResponse.failure(request_id, jsonrpc_code_for(error_code), message)
            )
            return
        self.send_response(JsonRpcResponse.success(request_id, body))