"""Gateway module - tool dispatch, lifecycle and resources."""

from .schemas import (
    ResourceContents,
    ResourceDescriptor,
    TextContent,
    ToolResult,
)
from .exceptions import (
    ArgumentValidationError,
    GatewayError,
    ResourceNotFoundError,
    UnknownToolError,
)
from .envelope import error_result, success_result
from .lifecycle import LifecycleGate, LifecycleState
from .handlers import HANDLERS, ToolHandler
from .dispatcher import ToolDispatcher
from .resources import RESOURCES, STATS_URI, ResourceProvider
from .service import RAGGateway, build_gateway


__all__ = [
    # Schemas
    "ResourceContents",
    "ResourceDescriptor",
    "TextContent",
    "ToolResult",
    # Exceptions
    "ArgumentValidationError",
    "GatewayError",
    "ResourceNotFoundError",
    "UnknownToolError",
    # Envelope
    "error_result",
    "success_result",
    # Components
    "LifecycleGate",
    "LifecycleState",
    "HANDLERS",
    "ToolHandler",
    "ToolDispatcher",
    "RESOURCES",
    "STATS_URI",
    "ResourceProvider",
    "RAGGateway",
    "build_gateway",
]
