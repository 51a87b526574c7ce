"""
Name: Command-line interface.
Description: Implements the command-line interface for swagger-mcp with commands for serving a swagger document as an MCP server, listing the generated tools, and calling a single tool against the live API.
"""

import argparse
import json
import logging
import sys

import anyio
from pydantic import ValidationError

from . import __version__
from .constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TRANSPORT, SUPPORTED_TRANSPORTS
from .exceptions import SwaggerMCPError, ToolNotFoundError
from .manager import build_toolkit, call_tool_once, start_mcp_server
from .utils import ServerConfig, parse_tool_arguments, setup_environment

logger = logging.getLogger(__name__)


def _config_from_args(args) -> ServerConfig:
    """Build the server configuration from parsed arguments and the environment."""
    return ServerConfig.from_env(
        swagger_url=args.swagger_url,
        swagger_file=args.swagger_file,
        tool_prefix=args.tool_prefix,
        base_url=args.base_url,
        ignore_ssl=args.ignore_ssl,
        auth_header=args.auth_header,
    )


def serve_command(args):
    """Serve the swagger document's operations as MCP tools."""
    config = _config_from_args(args)
    start_mcp_server(
        config,
        transport=args.transport,
        host=args.host,
        port=args.port,
    )


def list_tools_command(args):
    """List the tools generated from the swagger document."""
    config = _config_from_args(args)
    toolkit = build_toolkit(config)
    try:
        schemas = toolkit.get_tool_schemas()
    finally:
        anyio.run(toolkit.aclose)

    if args.json:
        print(json.dumps(schemas, indent=2))
        return

    print(f"Found {len(schemas)} tool(s):")
    for schema in schemas:
        print(f"  - {schema['name']}: {schema['description']}")
        required = schema["inputSchema"]["required"]
        for param_name, param in schema["inputSchema"]["properties"].items():
            marker = " (required)" if param_name in required else ""
            print(f"      {param_name} [{param['type']}]{marker}")


def call_command(args):
    """Call a single tool and print its result."""
    config = _config_from_args(args)
    toolkit = build_toolkit(config)

    tool = toolkit.get_tool(args.tool)
    if tool is None:
        anyio.run(toolkit.aclose)
        raise ToolNotFoundError(args.tool)

    try:
        arguments = parse_tool_arguments(tool.input_schema, args.arguments)
    except ValueError as e:
        anyio.run(toolkit.aclose)
        logger.error(str(e))
        sys.exit(2)
    logger.debug(f"Calling {args.tool} with {arguments}")

    result = anyio.run(call_tool_once, toolkit, args.tool, arguments)
    print(result.text)
    if result.is_error:
        sys.exit(1)


def add_source_args(parser: argparse.ArgumentParser):
    """Add swagger source and HTTP client options to a parser."""
    parser.add_argument(
        "-u", "--swagger-url", type=str, default=None, help="URL to swagger documentation"
    )
    parser.add_argument(
        "-f", "--swagger-file", type=str, default=None, help="Path to local swagger file"
    )
    parser.add_argument(
        "-p",
        "--tool-prefix",
        type=str,
        default=None,
        help="Custom prefix for generated tools",
    )
    parser.add_argument(
        "-b", "--base-url", type=str, default=None, help="Override base URL for API calls"
    )
    parser.add_argument(
        "--ignore-ssl", action="store_true", help="Ignore SSL certificate errors"
    )
    parser.add_argument(
        "-a",
        "--auth-header",
        type=str,
        default=None,
        help='Authentication header (e.g., "Bearer token")',
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="swagger-mcp",
        description="MCP server that converts REST APIs with Swagger documentation into MCP tools",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the MCP server")
    add_source_args(serve_parser)
    serve_parser.add_argument(
        "--transport",
        choices=SUPPORTED_TRANSPORTS,
        default=DEFAULT_TRANSPORT,
        help="Transport to serve on",
    )
    serve_parser.add_argument(
        "--host", type=str, default=DEFAULT_HOST, help="Host to bind the sse/http server to"
    )
    serve_parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help="Port to bind the sse/http server to"
    )

    # List tools command
    list_parser = subparsers.add_parser(
        "list-tools", help="List the tools generated from the swagger document"
    )
    add_source_args(list_parser)
    list_parser.add_argument(
        "--json", action="store_true", help="Print full tool schemas as JSON"
    )

    # Call command
    call_parser = subparsers.add_parser("call", help="Call a single tool")
    add_source_args(call_parser)
    call_parser.add_argument("tool", type=str, help="Name of the tool to call")
    call_parser.add_argument(
        "arguments",
        nargs="*",
        help="Arguments as name=value pairs or a single JSON object",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_environment(args.debug)

    commands = {
        "serve": serve_command,
        "list-tools": list_tools_command,
        "call": call_command,
    }

    try:
        commands[args.command](args)
    except (SwaggerMCPError, ValidationError) as e:
        logger.error(f"swagger-mcp {args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
