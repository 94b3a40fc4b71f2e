"""MCP gateway exposing a retrieval pipeline as tools and resources."""

__version__ = "1.0.0"
