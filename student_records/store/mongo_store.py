"""
Student Records MongoDB Store
-----------------------------
Record store backed by a single MongoDB collection. ``MongoClient`` pools
connections internally and is safe to share across connection threads.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from student_records.core.config import StoreConfig
from student_records.core.errors import RecordStoreError, StudentNotFoundError
from student_records.core.types import StudentRecord
from student_records.store.base import RecordStore

logger = logging.getLogger("StudentRecords.Mongo")


class MongoRecordStore(RecordStore):
    """Reads and writes student documents ``{_id, name, subjects}``."""

    def __init__(
        self,
        uri: str,
        db_name: str,
        collection_name: str,
        *,
        timeout_ms: int = 5000,
        client: Optional[MongoClient] = None,
    ):
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection_name
        self._owns_client = client is None
        try:
            self._client = client or MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc
        self._collection: Collection = self._client[db_name][collection_name]

    @classmethod
    def from_config(cls, config: StoreConfig) -> "MongoRecordStore":
        return cls(
            config.mongodb_uri,
            config.db_name,
            config.collection_name,
            timeout_ms=config.server_selection_timeout_ms,
        )

    @staticmethod
    def _doc_to_record(doc: Mapping[str, Any]) -> StudentRecord:
        return StudentRecord(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            name=doc.get("name"),
            subjects=doc.get("subjects") or {},
        )

    def ping(self) -> None:
        try:
            self._client.admin.command("ping")
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc
        logger.info(
            "Connected to MongoDB %s (database=%s, collection=%s)",
            self.uri,
            self.db_name,
            self.collection_name,
        )

    def find_all(self) -> List[StudentRecord]:
        try:
            docs = list(self._collection.find({}))
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc

        records = []
        for doc in docs:
            try:
                records.append(self._doc_to_record(doc))
            except ValidationError:
                logger.warning("Skipping malformed student document %r", doc.get("_id"))
        return records

    def find_by_name(self, name: str) -> StudentRecord:
        try:
            doc = self._collection.find_one({"name": name})
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc
        if doc is None:
            raise StudentNotFoundError(name)
        try:
            return self._doc_to_record(doc)
        except ValidationError as exc:
            raise RecordStoreError(f"Malformed student document for '{name}': {exc}") from exc

    def insert(self, name: str, subjects: Dict[str, float]) -> str:
        try:
            result = self._collection.insert_one({"name": name, "subjects": dict(subjects)})
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc
        return str(result.inserted_id)

    def insert_many(self, records: Iterable[StudentRecord]) -> List[str]:
        docs = [{"name": r.name, "subjects": dict(r.subjects)} for r in records]
        if not docs:
            return []
        try:
            result = self._collection.insert_many(docs)
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc
        return [str(inserted_id) for inserted_id in result.inserted_ids]

    def drop_all(self) -> None:
        try:
            self._collection.drop()
        except PyMongoError as exc:
            raise RecordStoreError(str(exc)) from exc

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
