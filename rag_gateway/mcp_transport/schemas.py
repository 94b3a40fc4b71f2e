"""Pydantic schemas for MCP protocol messages."""

from typing import Any, Literal
from pydantic import BaseModel, Field

from rag_gateway.gateway.schemas import ResourceContents, ResourceDescriptor
from rag_gateway.registry import ToolDescriptor


class MCPInitializeParams(BaseModel):
    """Parameters for initialize request."""
    
    protocolVersion: str = Field(default="2024-11-05", description="MCP protocol version")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    clientInfo: dict[str, Any] = Field(default_factory=dict)


class MCPToolListResult(BaseModel):
    """Result for tools/list."""
    
    tools: list[ToolDescriptor]


class MCPToolCallParams(BaseModel):
    """Parameters for tools/call."""
    
    name: str
    arguments: dict[str, Any] | None = Field(default_factory=dict)


class MCPResourceListResult(BaseModel):
    """Result for resources/list."""
    
    resources: list[ResourceDescriptor]


class MCPResourceReadParams(BaseModel):
    """Parameters for resources/read."""
    
    uri: str


class MCPResourceReadResult(BaseModel):
    """Result for resources/read."""
    
    contents: list[ResourceContents]


class MCPJSONRPCRequest(BaseModel):
    """Generic JSON-RPC 2.0 request."""
    
    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None


class MCPJSONRPCResponse(BaseModel):
    """Generic JSON-RPC 2.0 response."""
    
    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any | None = None
    error: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        """Dump with exactly one of result/error, as JSON-RPC requires."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error
        else:
            data["result"] = self.result if self.result is not None else {}
        return data


# Standard JSON-RPC error codes
class MCPErrorCodes:
    """Standard MCP/JSON-RPC error codes."""
    
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    
    # MCP-defined
    RESOURCE_NOT_FOUND = -32002
