import json
import logging

import pytest

from student_records.core.config import ToolConfig
from student_records.mcp.dispatcher import ToolDispatcher
from student_records.mcp.session import McpSession
from student_records.store.sample_data import sample_records
from student_records.store.sqlite_store import SQLiteRecordStore

CONFIG_ENV_VARS = [
    "STORE_BACKEND",
    "MONGODB_URI",
    "DB_NAME",
    "COLLECTION_NAME",
    "SQLITE_PATH",
    "MONGODB_TIMEOUT_MS",
    "MCP_MODE",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_FILE",
    "MCP_TOOL_RESPONSE_MAX_CHARS",
    "MCP_TOOL_CALL_WARN_MS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_logging():
    """Undo configure_logging: re-enable logging and drop the handlers it installed."""
    root = logging.getLogger()
    level = root.level
    yield
    logging.disable(logging.NOTSET)
    for handler in list(root.handlers):
        if type(handler) in (logging.FileHandler, logging.StreamHandler, logging.NullHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def store(tmp_path):
    s = SQLiteRecordStore(tmp_path / "students.db")
    yield s
    s.close()


@pytest.fixture
def seeded_store(store):
    store.insert_many(sample_records())
    return store


@pytest.fixture
def dispatcher(seeded_store):
    return ToolDispatcher(seeded_store)


@pytest.fixture
def session(dispatcher):
    return McpSession(dispatcher, tool_config=ToolConfig(), peer="test")


@pytest.fixture
def call(session):
    """Send one request object through the session and decode the reply."""
    def _call(request):
        raw = session.handle_line(json.dumps(request))
        return None if raw is None else json.loads(raw)
    return _call
