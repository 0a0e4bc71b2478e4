"""
Student Records exceptions.

Every exception raised by the dispatcher carries the JSON-RPC error code the
session reports for it.
"""

from __future__ import annotations

from typing import Any

# JSON-RPC error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class StudentRecordsError(RuntimeError):
    """Base class for all Student Records errors."""

    code: int = INTERNAL_ERROR


class ToolArgumentError(StudentRecordsError):
    """A required tool argument is missing or has the wrong type."""

    code = INVALID_PARAMS

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidGradeError(ToolArgumentError):
    """A grade in ``add_student.subjects`` is neither numeric nor a numeric string."""

    def __init__(self, subject: str, value: Any) -> None:
        self.subject = subject
        self.value = value
        if isinstance(value, str):
            message = f"Invalid grade for {subject}: {value}"
        else:
            message = f"Invalid grade type for {subject}"
        super().__init__(message, field="subjects")


class UnknownToolError(StudentRecordsError):
    """``tools/call`` named a tool that is not in the registry."""

    code = INVALID_PARAMS

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class StudentNotFoundError(StudentRecordsError):
    """A name lookup matched zero records."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Student '{name}' not found")


class RecordStoreError(StudentRecordsError):
    """The record store failed for a reason other than a missing record."""
