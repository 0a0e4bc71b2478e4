"""
Record store contract shared by the MongoDB and SQLite backends.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from student_records.core.types import StudentRecord


class RecordStore(ABC):
    """
    Persistence collaborator for student records.

    Implementations must be safe to call concurrently from several
    connection threads.
    """

    @abstractmethod
    def find_all(self) -> List[StudentRecord]:
        ...

    @abstractmethod
    def find_by_name(self, name: str) -> StudentRecord:
        """Return the first record named ``name`` or raise StudentNotFoundError."""

    @abstractmethod
    def insert(self, name: str, subjects: Dict[str, float]) -> str:
        """Insert a record and return its generated id."""

    @abstractmethod
    def ping(self) -> None:
        """Raise RecordStoreError when the backend is unreachable."""

    @abstractmethod
    def drop_all(self) -> None:
        ...

    def insert_many(self, records: Iterable[StudentRecord]) -> List[str]:
        return [self.insert(record.name, dict(record.subjects)) for record in records]

    def close(self) -> None:
        pass

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
