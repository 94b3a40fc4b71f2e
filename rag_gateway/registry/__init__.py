"""Registry module - Tool definitions and discovery."""

from .schemas import ToolDescriptor, ToolRegistryConfig
from .config import load_tool_registry
from .service import ToolRegistry


__all__ = [
    "ToolDescriptor",
    "ToolRegistryConfig",
    "load_tool_registry",
    "ToolRegistry",
]
