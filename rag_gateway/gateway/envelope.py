"""Builds the uniform ToolResult envelope."""

import json
import math
from typing import Any

from rag_gateway.exceptions import RAGGatewayError

from .schemas import TextContent, ToolResult


def _finite(value: Any) -> Any:
    # NaN and Infinity are not JSON; clients read them as null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def to_json_text(payload: Any) -> str:
    """Serialize a payload as strict JSON text.

    Raises:
        TypeError: If the payload has keys JSON cannot represent.
    """
    return json.dumps(_finite(payload), indent=2, default=str, allow_nan=False)


def error_message(error: BaseException | str) -> str:
    """Human-readable message for an error, never empty."""
    if isinstance(error, str):
        return error
    if isinstance(error, RAGGatewayError):
        return error.message
    return str(error) or error.__class__.__name__


def success_result(payload: Any) -> ToolResult:
    """Wrap a handler's result as a successful tool response.

    Args:
        payload: JSON-serializable result produced by a handler.

    Returns:
        ToolResult with the serialized payload as its only content item.
    """
    return ToolResult(content=[TextContent(text=to_json_text(payload))])


def error_result(tool_name: str, error: BaseException | str) -> ToolResult:
    """Wrap a failure as an error tool response.

    Args:
        tool_name: Name of the tool whose call failed.
        error: The exception raised, or a message.

    Returns:
        ToolResult with isError set and ``{"error", "tool"}`` as payload.
    """
    payload = {"error": error_message(error), "tool": tool_name}
    return ToolResult(content=[TextContent(text=to_json_text(payload))], isError=True)
