# Lazy import: MongoRecordStore needs pymongo
from student_records.core.config import StoreConfig
from student_records.store.base import RecordStore
from student_records.store.sqlite_store import SQLiteRecordStore

__all__ = ["RecordStore", "SQLiteRecordStore", "MongoRecordStore", "open_store"]


def open_store(config: StoreConfig) -> RecordStore:
    """Build the configured backend and verify it is reachable."""
    if config.backend == "sqlite":
        store: RecordStore = SQLiteRecordStore.from_config(config)
    else:
        from student_records.store.mongo_store import MongoRecordStore
        store = MongoRecordStore.from_config(config)
    try:
        store.ping()
    except Exception:
        store.close()
        raise
    return store


def __getattr__(name):
    if name == "MongoRecordStore":
        from student_records.store.mongo_store import MongoRecordStore
        return MongoRecordStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
