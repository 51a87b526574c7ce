"""
Name: Core functionality manager.
Description: Orchestrates swagger-mcp: loads the swagger document named by the configuration, builds the tool catalog, and starts the MCP server or runs a single tool call.
"""

import logging
from typing import Any, Dict, Optional

from .constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TRANSPORT
from .mcp.server import MCPServer
from .openapi.models import ToolCallResult
from .openapi.tools import SwaggerToolkit
from .utils import ServerConfig, load_swagger_document

logger = logging.getLogger(__name__)


def build_toolkit(
    config: ServerConfig, swagger_doc: Optional[Dict[str, Any]] = None
) -> SwaggerToolkit:
    """Load the swagger document and build the tool catalog.

    Args:
        config: Server configuration
        swagger_doc: Already loaded document; loaded from the config when omitted

    Returns:
        Toolkit holding the full catalog

    Raises:
        ConfigurationError: If no document source is configured
        SwaggerSpecError: If the document cannot be loaded or has no paths
    """
    if swagger_doc is None:
        swagger_doc = load_swagger_document(config)

    return SwaggerToolkit(
        swagger_doc,
        tool_prefix=config.tool_prefix,
        base_url=config.base_url,
        client_config=config.client_config,
    )


def start_mcp_server(
    config: ServerConfig,
    transport: str = DEFAULT_TRANSPORT,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
):
    """Build the catalog and serve it until the transport closes.

    Args:
        config: Server configuration
        transport: One of stdio, sse or http
        host: Host for the sse/http transports
        port: Port for the sse/http transports
    """
    toolkit = build_toolkit(config)
    server = MCPServer(toolkit, host=host, port=port)
    server.run(transport=transport)


async def call_tool_once(
    toolkit: SwaggerToolkit, tool_name: str, arguments: Dict[str, Any]
) -> ToolCallResult:
    """Call one tool and close the toolkit's HTTP client afterwards.

    Raises:
        ToolNotFoundError: If no tool has this name
    """
    async with toolkit:
        return await toolkit.call_tool(tool_name, arguments)
