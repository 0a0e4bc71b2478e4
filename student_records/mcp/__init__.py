from student_records.mcp.definitions import list_tools
from student_records.mcp.dispatcher import ToolDispatcher
from student_records.mcp.session import McpSession
from student_records.mcp.transports import StdioTransport, TcpTransport

__all__ = ["McpSession", "ToolDispatcher", "StdioTransport", "TcpTransport", "list_tools"]
