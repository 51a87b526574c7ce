"""MCP server module for swagger-mcp."""

from .server import MCPServer, create_server_from_toolkit

__all__ = ["MCPServer", "create_server_from_toolkit"]
