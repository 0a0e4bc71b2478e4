"""Tests for student_records.store.mongo_store against a mocked MongoClient."""

from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import ConfigurationError, OperationFailure, ServerSelectionTimeoutError

from student_records.core.config import StoreConfig
from student_records.core.errors import RecordStoreError, StudentNotFoundError
from student_records.core.types import StudentRecord
from student_records.store import open_store
from student_records.store.mongo_store import MongoRecordStore


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def collection(client):
    coll = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = coll
    return coll


@pytest.fixture
def mongo_store(client, collection):
    return MongoRecordStore("mongodb://test:27017", "school", "students", client=client)


class TestMongoRecordStore:
    def test_targets_configured_collection(self, client, mongo_store):
        client.__getitem__.assert_called_with("school")
        client.__getitem__.return_value.__getitem__.assert_called_with("students")

    def test_find_all_renders_object_ids(self, collection, mongo_store):
        oid = ObjectId()
        collection.find.return_value = [
            {"_id": oid, "name": "Ana", "subjects": {"historia": 9.3}},
        ]
        records = mongo_store.find_all()
        collection.find.assert_called_once_with({})
        assert records == [StudentRecord(id=str(oid), name="Ana", subjects={"historia": 9.3})]

    def test_find_all_skips_malformed_documents(self, collection, mongo_store):
        collection.find.return_value = [
            {"_id": ObjectId(), "name": "Ana", "subjects": {"historia": 9.3}},
            {"_id": ObjectId(), "subjects": {"historia": 1}},
            {"_id": ObjectId(), "name": "Bad", "subjects": {"historia": "nine"}},
            {"_id": ObjectId(), "name": "Luis"},
        ]
        assert [r.name for r in mongo_store.find_all()] == ["Ana", "Luis"]

    def test_find_by_name(self, collection, mongo_store):
        collection.find_one.return_value = {"_id": "abc", "name": "Ana", "subjects": {"m": 9}}
        record = mongo_store.find_by_name("Ana")
        collection.find_one.assert_called_once_with({"name": "Ana"})
        assert record.id == "abc"
        assert record.subjects == {"m": 9.0}

    def test_find_by_name_missing(self, collection, mongo_store):
        collection.find_one.return_value = None
        with pytest.raises(StudentNotFoundError, match="Student 'Pedro' not found"):
            mongo_store.find_by_name("Pedro")

    def test_insert_returns_hex_id(self, collection, mongo_store):
        oid = ObjectId()
        collection.insert_one.return_value.inserted_id = oid
        assert mongo_store.insert("Pedro", {"math": 9.0}) == str(oid)
        collection.insert_one.assert_called_once_with({"name": "Pedro", "subjects": {"math": 9.0}})

    def test_insert_many(self, collection, mongo_store):
        oids = [ObjectId(), ObjectId()]
        collection.insert_many.return_value.inserted_ids = oids
        ids = mongo_store.insert_many([
            StudentRecord(name="A", subjects={"m": 1}),
            StudentRecord(name="B", subjects={}),
        ])
        assert ids == [str(o) for o in oids]
        docs = collection.insert_many.call_args.args[0]
        assert docs == [{"name": "A", "subjects": {"m": 1.0}}, {"name": "B", "subjects": {}}]

    def test_insert_many_empty_skips_driver(self, collection, mongo_store):
        assert mongo_store.insert_many([]) == []
        collection.insert_many.assert_not_called()

    def test_drop_all(self, collection, mongo_store):
        mongo_store.drop_all()
        collection.drop.assert_called_once_with()

    def test_ping(self, client, mongo_store):
        mongo_store.ping()
        client.admin.command.assert_called_once_with("ping")

    def test_driver_errors_keep_their_message(self, client, collection, mongo_store):
        client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
        with pytest.raises(RecordStoreError, match="^no servers$"):
            mongo_store.ping()

        collection.find.side_effect = OperationFailure("not authorized")
        with pytest.raises(RecordStoreError, match="not authorized"):
            mongo_store.find_all()

        collection.insert_one.side_effect = OperationFailure("write failed")
        with pytest.raises(RecordStoreError, match="write failed"):
            mongo_store.insert("A", {})

    def test_injected_client_is_not_closed(self, client, mongo_store):
        mongo_store.close()
        client.close.assert_not_called()


class TestClientOwnership:
    def test_builds_and_closes_own_client(self):
        with patch("student_records.store.mongo_store.MongoClient") as client_cls:
            store = MongoRecordStore.from_config(
                StoreConfig(mongodb_uri="mongodb://db:27017", server_selection_timeout_ms=1500)
            )
            client_cls.assert_called_once_with("mongodb://db:27017", serverSelectionTimeoutMS=1500)
            store.close()
            client_cls.return_value.close.assert_called_once_with()

    def test_bad_uri_is_a_store_error(self):
        with patch(
            "student_records.store.mongo_store.MongoClient",
            side_effect=ConfigurationError("bad uri"),
        ):
            with pytest.raises(RecordStoreError, match="bad uri"):
                MongoRecordStore("nope://", "school", "students")

    def test_open_store_pings_mongo(self):
        with patch("student_records.store.mongo_store.MongoClient") as client_cls:
            store = open_store(StoreConfig(backend="mongo"))
            client_cls.return_value.admin.command.assert_called_once_with("ping")
            store.close()

    def test_open_store_ping_failure_closes_client(self):
        with patch("student_records.store.mongo_store.MongoClient") as client_cls:
            client_cls.return_value.admin.command.side_effect = ServerSelectionTimeoutError("down")
            with pytest.raises(RecordStoreError):
                open_store(StoreConfig(backend="mongo"))
            client_cls.return_value.close.assert_called_once_with()

    def test_lazy_package_attribute(self):
        import student_records.store as store_pkg
        assert store_pkg.MongoRecordStore is MongoRecordStore
