"""Custom exceptions for the tool-dispatch gateway."""

from rag_gateway.exceptions import RAGGatewayError


class GatewayError(RAGGatewayError):
    """Base exception for gateway-specific errors."""
    pass


class UnknownToolError(GatewayError):
    """Raised when requested tool is not in the registry.
    
    Attributes:
        tool_name: Name of the tool that was not found.
    """
    
    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Unknown tool: {tool_name}",
            code="TOOL_NOT_FOUND"
        )
        self.tool_name = tool_name


class ArgumentValidationError(GatewayError):
    """Raised when tool arguments don't match the tool's schema.
    
    Attributes:
        tool_name: Tool whose arguments were rejected.
        errors: One human-readable line per offending field.
    """
    
    def __init__(self, tool_name: str, errors: list[str]):
        super().__init__(
            message=f"Invalid arguments for tool '{tool_name}': {'; '.join(errors)}",
            code="INVALID_ARGUMENTS"
        )
        self.tool_name = tool_name
        self.errors = errors


class ResourceNotFoundError(GatewayError):
    """Raised when a resource URI is not served by the gateway.
    
    Attributes:
        uri: The requested resource URI.
    """
    
    def __init__(self, uri: str):
        super().__init__(
            message=f"Unknown resource: {uri}",
            code="RESOURCE_NOT_FOUND"
        )
        self.uri = uri
