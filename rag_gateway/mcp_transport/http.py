"""HTTP transport for the MCP protocol."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from rag_gateway.dependencies import get_gateway
from rag_gateway.gateway import RAGGateway

from .schemas import MCPErrorCodes, MCPJSONRPCResponse
from .service import process_message


router = APIRouter(prefix="", tags=["mcp"])

KEEPALIVE_SECONDS = 30


@router.get("/sse", operation_id="sse_endpoint_get")
async def sse_get_endpoint(request: Request):
    """Establish SSE stream and send endpoint info."""
    async def event_stream():
        # Send endpoint configuration
        message_endpoint = f"{request.url.scheme}://{request.url.netloc}/mcp"
        yield f"event: endpoint\ndata: {message_endpoint}\n\n"

        # Keep connection alive
        try:
            while True:
                await asyncio.sleep(KEEPALIVE_SECONDS)
                yield ": ping\n\n"
        except asyncio.CancelledError:
            pass

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("/mcp", operation_id="mcp_endpoint_post")
async def mcp_post_endpoint(
    request: Request,
    gateway: Annotated[RAGGateway, Depends(get_gateway)],
):
    """Handle one JSON-RPC 2.0 message."""
    try:
        body = await request.json()
    except ValueError:
        response = MCPJSONRPCResponse(
            id=None,
            error={"code": MCPErrorCodes.PARSE_ERROR, "message": "Invalid JSON"},
        )
        return JSONResponse(content=response.to_wire())

    response = await process_message(gateway, body)
    if response is None:
        return Response(status_code=202)
    return JSONResponse(content=response.to_wire())
