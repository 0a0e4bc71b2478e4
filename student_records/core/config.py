"""
Student Records Configuration
-----------------------------
Centralized configuration for the record store, the transports, logging and
tool result rendering. Loads from environment variables or a YAML file.
"""

import os
import logging
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger("StudentRecords.Config")

DEFAULT_MONGODB_URI = "mongodb://127.0.0.1:27017"
DEFAULT_PORT = 8080
MIN_TOOL_RESPONSE_MAX_CHARS = 256
DEFAULT_TOOL_CALL_WARN_MS = 5000.0


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _parse_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "Invalid %s value '%s'; expected integer. Using default of %d.",
            name,
            raw,
            default,
        )
        return default


def _parse_float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
        if value < 0:
            raise ValueError
        return value
    except ValueError:
        logger.warning(
            "Invalid %s value '%s'; expected non-negative number. Using default of %s.",
            name,
            raw,
            default,
        )
        return default


class StoreConfig(BaseModel):
    """Record store backend configuration."""
    backend: Literal["mongo", "sqlite"] = "mongo"
    mongodb_uri: str = DEFAULT_MONGODB_URI
    db_name: str = "school"
    collection_name: str = "students"
    sqlite_path: str = "students.db"
    server_selection_timeout_ms: int = 5000


class TransportConfig(BaseModel):
    """Transport selection and TCP binding."""
    mode: Literal["auto", "stdio", "tcp"] = "auto"
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)


class LoggingConfig(BaseModel):
    """Diagnostic logging. In stdio mode only ``file`` is ever written."""
    level: str = "INFO"
    file: Optional[str] = None


class ToolConfig(BaseModel):
    """Tool result rendering and call telemetry."""
    # None returns tool results whole
    response_max_chars: Optional[int] = Field(default=None, ge=MIN_TOOL_RESPONSE_MAX_CHARS)
    call_warn_ms: float = DEFAULT_TOOL_CALL_WARN_MS


class AppConfig(BaseModel):
    """Root configuration for the Student Records server."""
    store: StoreConfig = Field(default_factory=StoreConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    tools: ToolConfig = Field(default_factory=ToolConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Load configuration from environment variables.

        Environment variables override defaults:
        - STORE_BACKEND: mongo | sqlite
        - MONGODB_URI / DB_NAME / COLLECTION_NAME: MongoDB target
        - SQLITE_PATH: SQLite database file
        - MCP_MODE: auto | stdio | tcp
        - HOST / PORT: TCP binding
        - LOG_LEVEL / LOG_FILE: diagnostics
        - MCP_TOOL_RESPONSE_MAX_CHARS / MCP_TOOL_CALL_WARN_MS: tool rendering
        """
        max_chars = _parse_int_env("MCP_TOOL_RESPONSE_MAX_CHARS", 0)
        return cls(
            store=StoreConfig(
                backend=_env_str("STORE_BACKEND", "mongo").lower(),
                mongodb_uri=_env_str("MONGODB_URI", DEFAULT_MONGODB_URI),
                db_name=_env_str("DB_NAME", "school"),
                collection_name=_env_str("COLLECTION_NAME", "students"),
                sqlite_path=_env_str("SQLITE_PATH", "students.db"),
                server_selection_timeout_ms=_parse_int_env("MONGODB_TIMEOUT_MS", 5000),
            ),
            transport=TransportConfig(
                mode=_env_str("MCP_MODE", "auto").lower(),
                host=_env_str("HOST", "0.0.0.0"),
                port=_parse_int_env("PORT", DEFAULT_PORT),
            ),
            logging=LoggingConfig(
                level=_env_str("LOG_LEVEL", "INFO").upper(),
                file=os.environ.get("LOG_FILE") or None,
            ),
            tools=ToolConfig(
                response_max_chars=(
                    max(MIN_TOOL_RESPONSE_MAX_CHARS, max_chars) if max_chars > 0 else None
                ),
                call_warn_ms=_parse_float_env("MCP_TOOL_CALL_WARN_MS", DEFAULT_TOOL_CALL_WARN_MS),
            ),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "AppConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.warning("Config file not found: %s; using environment", path)
            return cls.from_env()
        return cls(**(data or {}))
