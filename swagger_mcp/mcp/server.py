"""
Name: MCP Server.
Description: Provides the MCP Server implementation that exposes a SwaggerToolkit's catalog over the tool protocol. Creates the FastMCP instance, registers one tool per catalog entry, and runs it on the chosen transport.
"""

import logging
from typing import Any, Dict, List, Optional

import anyio
from fastmcp import FastMCP

from ..constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TRANSPORT, SERVER_NAME
from ..openapi.models import ToolCallResult
from ..openapi.tools import FastMCPSwaggerTool, SwaggerToolkit

logger = logging.getLogger(__name__)


class MCPServer:
    """MCP Server implementation."""

    def __init__(
        self,
        toolkit: SwaggerToolkit,
        name: str = SERVER_NAME,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ):
        """Initialize an MCP server.

        Args:
            toolkit: Toolkit holding the tool catalog and HTTP client
            name: Server name reported to clients
            host: Host for the sse/http transports
            port: Port for the sse/http transports
        """
        self.toolkit = toolkit
        self.name = name
        self.host = host
        self.port = port

        self.mcp = self._create_mcp_instance()

    def _create_mcp_instance(self) -> FastMCP:
        """Create a FastMCP instance for this server.

        Returns:
            FastMCP instance
        """
        toolkit = self.toolkit

        mcp = FastMCP(
            self.name,
            instructions=toolkit.spec_parser.description or None,
        )

        registered = set()
        for rest_tool in toolkit.get_tools():
            if rest_tool.name in registered:
                logger.warning(
                    f"Not registering duplicate tool '{rest_tool.name}' "
                    f"({rest_tool.endpoint.method.upper()} {rest_tool.endpoint.path})"
                )
                continue

            mcp.add_tool(FastMCPSwaggerTool.from_rest_tool(rest_tool, toolkit))
            registered.add(rest_tool.name)
            logger.debug(f"Registered tool: {rest_tool.name}")

        return mcp

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return the name/description/inputSchema triple of every tool."""
        return self.toolkit.get_tool_schemas()

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> ToolCallResult:
        """Call a tool by name.

        Raises:
            ToolNotFoundError: If no tool has this name
        """
        return await self.toolkit.call_tool(name, arguments or {})

    def run(self, transport: str = DEFAULT_TRANSPORT):
        """Run the server until the transport closes.

        Args:
            transport: One of stdio, sse or http
        """
        logger.info(f"Swagger MCP Server running on {transport}")
        try:
            if transport == "stdio":
                self.mcp.run(transport="stdio")
            else:
                self.mcp.run(transport=transport, host=self.host, port=self.port)
        finally:
            # One client serves every session until the transport stops
            anyio.run(self.toolkit.aclose)


def create_server_from_toolkit(
    toolkit: SwaggerToolkit,
    name: str = SERVER_NAME,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> MCPServer:
    """Create an MCP server for a toolkit.

    Args:
        toolkit: Toolkit holding the tool catalog
        name: Server name reported to clients
        host: Host for the sse/http transports
        port: Port for the sse/http transports

    Returns:
        MCP server
    """
    return MCPServer(toolkit=toolkit, name=name, host=host, port=port)
