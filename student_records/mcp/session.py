import time
import logging
from typing import Any, Dict, Optional, Union

from student_records.core.config import ToolConfig
from student_records.core.errors import StudentRecordsError
from student_records.version import __version__

from .definitions import list_tools
from .dispatcher import ToolDispatcher
from .envelope import EnvelopeParseError, RequestEnvelope, ResponseEnvelope
from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_INITIALIZE,
    METHOD_NOT_FOUND,
    METHOD_TOOLS_CALL,
    METHOD_TOOLS_LIST,
    NOTIFICATION_METHODS,
    PARSE_ERROR,
    PARSE_ERROR_ID,
    PROTOCOL_VERSION,
    SERVER_NAME,
    UNKNOWN_ID,
)
from .utils import format_tool_result_text

logger = logging.getLogger("StudentRecords.mcp.session")


class McpSession:
    """
    Turns one inbound line into at most one outbound line.

    A session keeps no state between lines; ``initialize`` is answered like
    any other request and is not a precondition for the other methods.
    Nothing raised while handling a line escapes ``handle_line``.
    """

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        *,
        tool_config: Optional[ToolConfig] = None,
        peer: str = "stdio",
    ):
        self.dispatcher = dispatcher
        self.tool_config = tool_config or ToolConfig()
        self.peer = peer

    def handle_line(self, line: Union[bytes, str]) -> Optional[str]:
        """Return the serialized response for ``line``, or None for notifications."""
        try:
            request = RequestEnvelope.parse(line)
        except EnvelopeParseError as exc:
            logger.warning("Unparseable request from %s: %s", self.peer, exc)
            return ResponseEnvelope.failure(
                PARSE_ERROR_ID, PARSE_ERROR, f"Parse error: {exc}"
            ).serialize()

        response = self.handle_request(request)
        if response is None:
            return None
        return response.serialize()

    def handle_request(self, request: RequestEnvelope) -> Optional[ResponseEnvelope]:
        msg_id = request.id if request.id is not None else UNKNOWN_ID
        method = request.method

        if method in NOTIFICATION_METHODS:
            logger.info("Received notification %s from %s", method, self.peer)
            return None

        try:
            if method == METHOD_INITIALIZE:
                return ResponseEnvelope.success(msg_id, self._initialize_result())
            if method == METHOD_TOOLS_LIST:
                return ResponseEnvelope.success(msg_id, {"tools": list_tools()})
            if method == METHOD_TOOLS_CALL:
                return self._handle_call_tool(msg_id, request.params)
        except Exception:
            logger.exception("Unexpected error while handling %s", method)
            return ResponseEnvelope.failure(
                msg_id, INTERNAL_ERROR, "Internal error during request dispatch."
            )

        logger.debug("Method not found: %s", method)
        return ResponseEnvelope.failure(msg_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    @staticmethod
    def _initialize_result() -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {
                "tools": {
                    "listChanged": False
                },
            },
            "serverInfo": {
                "name": SERVER_NAME,
                "version": __version__,
            },
        }

    def _handle_call_tool(self, msg_id: Any, params: Any) -> ResponseEnvelope:
        if not isinstance(params, dict):
            return ResponseEnvelope.failure(
                msg_id, INVALID_PARAMS, "Invalid params: tools/call params must be an object"
            )
        name = params.get("name")
        if not isinstance(name, str):
            return ResponseEnvelope.failure(
                msg_id, INVALID_PARAMS, "Invalid params: tools/call requires a string name"
            )
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        started = time.monotonic()
        outcome = "success"
        try:
            result = self.dispatcher.dispatch(name, arguments)
            text = format_tool_result_text(result, name, self.tool_config.response_max_chars)
            return ResponseEnvelope.success(msg_id, {
                "content": [{"type": "text", "text": text}]
            })
        except StudentRecordsError as exc:
            outcome = "error"
            return ResponseEnvelope.failure(msg_id, exc.code, str(exc))
        except Exception as exc:
            outcome = "error"
            logger.exception("Tool execution failed: %s", name)
            return ResponseEnvelope.failure(msg_id, INTERNAL_ERROR, str(exc))
        finally:
            elapsed_ms = (time.monotonic() - started) * 1000.0
            log_method = logger.warning if elapsed_ms >= self.tool_config.call_warn_ms else logger.info
            log_method(
                "Tool call: name=%s id=%r outcome=%s elapsed_ms=%.1f peer=%s",
                name,
                msg_id,
                outcome,
                elapsed_ms,
                self.peer,
            )
