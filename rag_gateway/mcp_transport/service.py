"""Business logic for MCP protocol handlers.

Shared by the HTTP and stdio transports: one decoded JSON-RPC message in,
one response (or None for notifications) out.
"""

from typing import Any

import structlog
from pydantic import ValidationError

from rag_gateway.config import get_settings
from rag_gateway.gateway import RAGGateway, ResourceNotFoundError

from .schemas import (
    MCPErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPResourceListResult,
    MCPResourceReadParams,
    MCPResourceReadResult,
    MCPToolCallParams,
    MCPToolListResult,
)


logger = structlog.get_logger("mcp_transport")

PROTOCOL_VERSION = "2024-11-05"


def _error(request_id: str | int | None, code: int, message: str) -> MCPJSONRPCResponse:
    return MCPJSONRPCResponse(id=request_id, error={"code": code, "message": message})


async def handle_initialize(params: MCPInitializeParams) -> dict[str, Any]:
    """Handle initialize request.
    
    Args:
        params: Initialize parameters from client.
        
    Returns:
        Server initialization response.
    """
    settings = get_settings()
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "tools": {
                "listChanged": False  # Static tool list
            },
            "resources": {},
        },
        "serverInfo": {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }
    }


async def handle_tools_list(gateway: RAGGateway) -> MCPToolListResult:
    """Handle tools/list request."""
    return MCPToolListResult(tools=gateway.list_tools())


async def handle_tools_call(
    gateway: RAGGateway,
    params: MCPToolCallParams,
    request_id: str | int | None = None,
) -> dict[str, Any]:
    """Handle tools/call request.
    
    Never raises for tool-level failures; those come back with isError set.
    """
    result = await gateway.call_tool(
        params.name,
        params.arguments,
        request_id=str(request_id) if request_id is not None else None,
    )
    return result.model_dump()


async def handle_resources_list(gateway: RAGGateway) -> MCPResourceListResult:
    """Handle resources/list request."""
    return MCPResourceListResult(resources=gateway.list_resources())


async def handle_resources_read(gateway: RAGGateway, params: MCPResourceReadParams) -> MCPResourceReadResult:
    """Handle resources/read request.
    
    Raises:
        ResourceNotFoundError: If the URI isn't served.
    """
    contents = await gateway.read_resource(params.uri)
    return MCPResourceReadResult(contents=[contents])


async def process_message(gateway: RAGGateway, body: Any) -> MCPJSONRPCResponse | None:
    """Handle one decoded JSON-RPC message.
    
    Args:
        gateway: The gateway serving the protocol.
        body: Decoded JSON message.
        
    Returns:
        The response to send, or None when the message is a notification.
    """
    is_notification = isinstance(body, dict) and "id" not in body
    try:
        jsonrpc_request = MCPJSONRPCRequest.model_validate(body)
    except ValidationError:
        request_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(request_id, (str, int)):
            request_id = None
        return _error(request_id, MCPErrorCodes.INVALID_REQUEST, "Invalid JSON-RPC request")

    method = jsonrpc_request.method
    params = jsonrpc_request.params or {}
    request_id = jsonrpc_request.id

    try:
        if method == "initialize":
            init_params = MCPInitializeParams(**params)
            result = await handle_initialize(init_params)
            logger.info("client_initialized", client=init_params.clientInfo.get("name"))
            return MCPJSONRPCResponse(id=request_id, result=result)

        elif method.startswith("notifications/"):
            # notifications/initialized and friends need no answer
            return None

        elif method == "ping":
            return MCPJSONRPCResponse(id=request_id, result={})

        elif method == "tools/list":
            result = await handle_tools_list(gateway)
            return MCPJSONRPCResponse(id=request_id, result=result.model_dump())

        elif method == "tools/call":
            call_params = MCPToolCallParams(**params)
            result = await handle_tools_call(gateway, call_params, request_id=request_id)
            return MCPJSONRPCResponse(id=request_id, result=result)

        elif method == "resources/list":
            result = await handle_resources_list(gateway)
            return MCPJSONRPCResponse(id=request_id, result=result.model_dump())

        elif method == "resources/read":
            read_params = MCPResourceReadParams(**params)
            result = await handle_resources_read(gateway, read_params)
            return MCPJSONRPCResponse(id=request_id, result=result.model_dump())

        else:
            if is_notification:
                return None
            return _error(request_id, MCPErrorCodes.METHOD_NOT_FOUND, f"Method not found: {method}")

    except ValidationError as e:
        return _error(request_id, MCPErrorCodes.INVALID_PARAMS, f"Invalid params for {method}: {e.error_count()} error(s)")
    except ResourceNotFoundError as e:
        return _error(request_id, MCPErrorCodes.RESOURCE_NOT_FOUND, e.message)
    except Exception as e:
        logger.error("internal_error", method=method, error=str(e), exc_info=True)
        return _error(request_id, MCPErrorCodes.INTERNAL_ERROR, f"Internal error: {e}")
