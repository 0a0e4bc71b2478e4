"""
Student Records MCP Protocol Constants
"""

from student_records.core.errors import (  # noqa: F401
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mongodb-student-server"

# Id used on responses to lines that could not be parsed
PARSE_ERROR_ID = "error"
# Id used on responses to requests that carried no id
UNKNOWN_ID = "unknown"

METHOD_INITIALIZE = "initialize"
METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"

# Methods that never receive a response
NOTIFICATION_METHODS = frozenset({"notifications/initialized"})
