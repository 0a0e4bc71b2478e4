"""
Student Records SQLite Store
----------------------------
Zero-config local record store. Subjects are kept as a JSON object per row.
"""

import sqlite3
import json
import time
import uuid
import logging
import threading
from pathlib import Path
from typing import Optional, List, Dict

from pydantic import ValidationError

from student_records.core.config import StoreConfig
from student_records.core.errors import RecordStoreError, StudentNotFoundError
from student_records.core.types import StudentRecord
from student_records.store.base import RecordStore

logger = logging.getLogger("StudentRecords.SQLite")

MEMORY_DB = ":memory:"

CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS students (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    subjects    TEXT NOT NULL DEFAULT '{}',
    created_at  REAL NOT NULL
);
"""

CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_students_name ON students(name);",
]


class SQLiteRecordStore(RecordStore):
    """Student records in a single SQLite table, serialized behind one lock."""

    def __init__(self, db_path):
        self.db_path = db_path if str(db_path) == MEMORY_DB else Path(db_path)
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._initialize()

    @classmethod
    def from_config(cls, config: StoreConfig) -> "SQLiteRecordStore":
        return cls(config.sqlite_path)

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn

    def _initialize(self):
        try:
            with self._lock:
                conn = self._get_conn()
                conn.execute(CREATE_TABLE)
                for idx in CREATE_INDEXES:
                    conn.execute(idx)
                conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(f"Cannot open SQLite store at {self.db_path}: {exc}") from exc
        logger.info("SQLite record store initialized at %s", self.db_path)

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> StudentRecord:
        d = dict(row)
        d["subjects"] = json.loads(d.get("subjects") or "{}")
        d.pop("created_at", None)
        return StudentRecord(**d)

    def ping(self) -> None:
        try:
            with self._lock:
                self._get_conn().execute("SELECT 1").fetchone()
        except sqlite3.Error as exc:
            raise RecordStoreError(str(exc)) from exc

    def find_all(self) -> List[StudentRecord]:
        try:
            with self._lock:
                rows = self._get_conn().execute(
                    "SELECT id, name, subjects, created_at FROM students ORDER BY created_at, rowid"
                ).fetchall()
        except sqlite3.Error as exc:
            raise RecordStoreError(str(exc)) from exc

        records = []
        for row in rows:
            try:
                records.append(self._row_to_record(row))
            except (ValidationError, json.JSONDecodeError):
                logger.warning("Skipping malformed student row %s", row["id"])
        return records

    def find_by_name(self, name: str) -> StudentRecord:
        try:
            with self._lock:
                row = self._get_conn().execute(
                    """
                    SELECT id, name, subjects, created_at FROM students
                    WHERE name = ?
                    ORDER BY created_at, rowid
                    LIMIT 1
                    """,
                    (name,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise RecordStoreError(str(exc)) from exc
        if row is None:
            raise StudentNotFoundError(name)
        try:
            return self._row_to_record(row)
        except (ValidationError, json.JSONDecodeError) as exc:
            raise RecordStoreError(f"Malformed student row for '{name}': {exc}") from exc

    def insert(self, name: str, subjects: Dict[str, float]) -> str:
        record_id = str(uuid.uuid4())
        try:
            with self._lock:
                conn = self._get_conn()
                conn.execute(
                    "INSERT INTO students (id, name, subjects, created_at) VALUES (?, ?, ?, ?)",
                    (record_id, name, json.dumps(subjects), time.time()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(str(exc)) from exc
        return record_id

    def drop_all(self) -> None:
        try:
            with self._lock:
                conn = self._get_conn()
                conn.execute("DELETE FROM students")
                conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(str(exc)) from exc

    def count(self) -> int:
        with self._lock:
            row = self._get_conn().execute("SELECT COUNT(*) FROM students").fetchone()
        return int(row[0])

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
