import json
import logging
from typing import Any, Optional

logger = logging.getLogger("StudentRecords.mcp.utils")


def safe_json_dumps(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return json.dumps(str(payload), indent=2, ensure_ascii=False)


def truncate_tool_text(text: str, tool_name: str, max_chars: Optional[int] = None) -> str:
    """Cut ``text`` to ``max_chars``; a None limit leaves it whole."""
    if max_chars is None or len(text) <= max_chars:
        return text
    omitted = len(text) - max_chars
    trailer = (
        f"\n... [truncated {omitted} chars; raise MCP_TOOL_RESPONSE_MAX_CHARS or unset it]"
    )
    keep_chars = max(0, max_chars - len(trailer))
    logger.warning(
        "Truncating MCP tool response for '%s' from %d to %d chars.",
        tool_name,
        len(text),
        max_chars,
    )
    return text[:keep_chars] + trailer


def format_tool_result_text(result: Any, tool_name: str, max_chars: Optional[int] = None) -> str:
    """Render a tool result as the single text block returned to the caller."""
    return truncate_tool_text(safe_json_dumps(result), tool_name, max_chars)
