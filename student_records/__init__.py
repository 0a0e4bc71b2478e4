"""
Student Records MCP Server
"""

from student_records.core.errors import (
    RecordStoreError,
    StudentNotFoundError,
    StudentRecordsError,
    ToolArgumentError,
)
from student_records.core.types import StudentRecord
from student_records.version import __version__

__all__ = [
    "__version__",
    "StudentRecord",
    "StudentRecordsError",
    "StudentNotFoundError",
    "RecordStoreError",
    "ToolArgumentError",
]
