"""MCP transport module - JSON-RPC over HTTP and stdio."""

from .service import process_message
from .stdio import StdioTransport, run_stdio

__all__ = ["process_message", "StdioTransport", "run_stdio"]
