"""Response envelope - the single writer of command output.

Each invocation emits exactly one of three shapes to stdout:

    {"type": "sync",  "status": "ok",        "data": ...}
    {"type": "async", "status": "initiated", "processes": [...]}
    {"type": "error", "code": ..., "error": ..., "suggestion"?: ..., "context"?: ...}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal, TextIO, Union

from pydantic import BaseModel, Field
from pydantic_core import to_jsonable_python

from zaia_cli.errors import EXIT_OK, ZaiaError, exit_code_for
from zaia_cli.types import Process, ZaiaModel

# ==============================================================================
# Process Lifecycle
# ==============================================================================

STATUS_PENDING = "PENDING"
STATUS_RUNNING = "RUNNING"
STATUS_FINISHED = "FINISHED"
STATUS_FAILED = "FAILED"
STATUS_CANCELED = "CANCELED"

_STATUS_MAP = {
    "DONE": STATUS_FINISHED,
    "CANCELLED": STATUS_CANCELED,
}

TERMINAL_STATUSES = frozenset({STATUS_FINISHED, STATUS_FAILED, STATUS_CANCELED})


def map_status(native_status: str) -> str:
    """Translate a platform process status into the public vocabulary.

    Unknown statuses pass through unchanged.
    """
    return _STATUS_MAP.get(native_status, native_status)


def is_terminal(status: str) -> bool:
    """Whether a (native or public) process status is final."""
    return map_status(status) in TERMINAL_STATUSES


class ProcessOutput(ZaiaModel):
    """Public view of a platform process."""

    process_id: str
    action_name: str
    service_hostname: str | None = None
    service_id: str | None = None
    status: str
    created: str | None = None
    finished: str | None = None
    failure_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def process_to_output(process: Process, hostname: str = "", action_name: str = "") -> ProcessOutput:
    """Project a platform process onto its public shape.

    The hostname argument wins; otherwise the first related service is used.
    ``action_name`` names the command and is used when the platform sent none.
    """
    service_id = None
    if process.service_stacks:
        first = process.service_stacks[0]
        service_id = first.id or None
        if not hostname:
            hostname = first.name

    return ProcessOutput(
        process_id=process.id,
        action_name=process.action_name or action_name,
        service_hostname=hostname or None,
        service_id=service_id,
        status=map_status(process.status),
        created=process.created or None,
        finished=process.finished or None,
        failure_reason=process.fail_reason or None,
    )


# ==============================================================================
# Envelope Shapes
# ==============================================================================


class SyncResponse(BaseModel):
    type: Literal["sync"] = "sync"
    status: Literal["ok"] = "ok"
    data: Any = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status,
            "data": to_jsonable_python(self.data, by_alias=True, exclude_none=True),
        }


class AsyncResponse(BaseModel):
    type: Literal["async"] = "async"
    status: Literal["initiated"] = "initiated"
    processes: list[ProcessOutput] = Field(min_length=1)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status,
            "processes": [p.to_dict() for p in self.processes],
        }


class ErrorResponse(BaseModel):
    type: Literal["error"] = "error"
    code: str
    error: str
    suggestion: str | None = None
    context: Any = None

    @classmethod
    def from_error(cls, err: ZaiaError) -> ErrorResponse:
        return cls(code=err.code, error=err.message, suggestion=err.suggestion, context=err.context)

    @property
    def exit_code(self) -> int:
        return exit_code_for(self.code)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "code": self.code, "error": self.error}
        if self.suggestion:
            payload["suggestion"] = self.suggestion
        if self.context is not None:
            payload["context"] = to_jsonable_python(self.context, by_alias=True, exclude_none=True)
        return payload


Response = Union[SyncResponse, AsyncResponse, ErrorResponse]


def sync(data: Any = None) -> SyncResponse:
    return SyncResponse(data=data)


def async_(processes: list[ProcessOutput]) -> AsyncResponse:
    """Build an async response. Raises ``ValueError`` for an empty process list."""
    if not processes:
        raise ValueError("async response requires at least one process")
    return AsyncResponse(processes=processes)


# ==============================================================================
# Writer
# ==============================================================================


class Envelope:
    """Writes exactly one response to an explicit sink."""

    def __init__(self, sink: TextIO):
        self.sink = sink
        self.written = False

    def emit(self, response: Response) -> int:
        """Serialize the response as one JSON line and return the exit code."""
        if self.written:
            raise RuntimeError("envelope already written for this invocation")
        self.written = True

        self.sink.write(json.dumps(response.to_payload(), ensure_ascii=False) + "\n")
        self.sink.flush()

        if isinstance(response, ErrorResponse):
            return response.exit_code
        return EXIT_OK


@dataclass
class OperationResult:
    """Outcome of a mutating operation.

    Becomes an async response when processes were started, otherwise a sync
    response carrying ``data``.
    """

    processes: list[ProcessOutput] = field(default_factory=list)
    data: Any = None

    def to_response(self) -> Response:
        if self.processes:
            return async_(self.processes)
        return sync(self.data)
