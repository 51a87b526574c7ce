"""
Name: Swagger tools.
Description: Implements RestApiTool and SwaggerToolkit classes for creating MCP tools from Swagger documents. The toolkit builds the tool catalog once at startup and proxies tool calls to the REST API over a shared httpx client, turning every outcome into a tool result.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr, ValidationError

from ..constants import DEFAULT_HTTP_TIMEOUT, TOOL_PREFIX_SEPARATOR
from ..exceptions import SwaggerSpecError, ToolNotFoundError
from .models import (
    ApiEndpoint,
    ApiParameter,
    ClientConfig,
    ResolvedRequest,
    ToolCallResult,
)
from .request import build_request
from .spec import SwaggerSpecParser
from .utils import build_input_schema, generate_tool_name

logger = logging.getLogger(__name__)


class RestApiTool:
    """Tool for making requests to a REST API endpoint."""

    def __init__(self, name: str, description: str, endpoint: ApiEndpoint):
        """Initialize a REST API tool.

        Args:
            name: Name of the tool
            description: Description of the tool
            endpoint: API endpoint details
        """
        self._name = name
        self._description = description
        self._endpoint = endpoint
        self._input_schema = build_input_schema(endpoint.parameters)

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def endpoint(self) -> ApiEndpoint:
        return self._endpoint

    @property
    def input_schema(self) -> Dict[str, Any]:
        # Copy so callers cannot mutate the catalog entry
        return json.loads(json.dumps(self._input_schema))

    def to_schema(self) -> Dict[str, Any]:
        """Convert the tool to the name/description/inputSchema triple MCP lists.

        Returns:
            A schema for the tool
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    def build_request(self, args: Mapping[str, Any], base_url: str) -> ResolvedRequest:
        """Build the HTTP request for a call with the given arguments."""
        return build_request(
            self.endpoint.method,
            self.endpoint.path,
            self.endpoint.parameters,
            args,
            base_url,
        )

    def __repr__(self) -> str:
        return (
            f"RestApiTool(name={self.name!r}, "
            f"method={self.endpoint.method.upper()}, path={self.endpoint.path!r})"
        )


def _response_payload(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text."""
    if not response.content:
        return ""
    try:
        return response.json()
    except ValueError:
        return response.text


def _pretty(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class SwaggerToolkit:
    """Toolkit for creating tools from a Swagger document and calling them."""

    def __init__(
        self,
        spec: Dict[str, Any],
        tool_prefix: Optional[str] = None,
        base_url: Optional[str] = None,
        client_config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize a Swagger toolkit.

        Args:
            spec: Swagger document as a dictionary
            tool_prefix: Prefix for generated tool names (joined with ``_``)
            base_url: Base URL override; derived from the document when omitted
            client_config: HTTP client settings
            http_client: Preconfigured client, mainly for tests

        Raises:
            SwaggerSpecError: If the document has no paths
        """
        self.spec_parser = SwaggerSpecParser(spec)
        self.base_url = base_url or self.spec_parser.get_base_url()
        self.prefix = f"{tool_prefix}{TOOL_PREFIX_SEPARATOR}" if tool_prefix else ""
        self.client_config = client_config or ClientConfig()

        self.tools = self._create_tools()
        logger.info(f"Generated {len(self.tools)} tools from swagger document")

        if http_client is None:
            client_kwargs: Dict[str, Any] = {
                "verify": self.client_config.verify,
                "headers": self.client_config.headers,
                "follow_redirects": True,
            }
            timeout = self.client_config.timeout or DEFAULT_HTTP_TIMEOUT
            if timeout is not None:
                client_kwargs["timeout"] = timeout
            http_client = httpx.AsyncClient(**client_kwargs)
        self._client = http_client

    async def aclose(self):
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()

    async def __aenter__(self) -> "SwaggerToolkit":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def _create_tools(self) -> List[RestApiTool]:
        """Create tools from the Swagger document, in document order.

        Returns:
            List of REST API tools
        """
        tools = []
        seen_names = set()

        for path, method, operation in self.spec_parser.get_operations():
            name = generate_tool_name(self.prefix, method, path, operation)
            if name in seen_names:
                logger.warning(
                    f"Duplicate tool name '{name}' for {method.upper()} {path}; "
                    "lookups resolve to the first tool with this name"
                )
            seen_names.add(name)

            try:
                parameters = [
                    ApiParameter(
                        name=param_spec["name"],
                        description=param_spec.get("description") or "",
                        required=bool(param_spec.get("required", False)),
                        location=param_spec["in"],
                        type=param_spec.get("type"),
                        schema_definition=param_spec.get("schema") or {},
                    )
                    for param_spec in operation.get("parameters", [])
                ]
            except (KeyError, TypeError, ValidationError) as e:
                raise SwaggerSpecError(
                    f"Invalid parameter declaration in {method.upper()} {path}: {e}"
                ) from e

            endpoint = ApiEndpoint(
                operation_id=operation.get("operationId"),
                method=method,
                path=path,
                summary=operation.get("summary") or "",
                description=operation.get("description") or "",
                parameters=parameters,
            )

            description = (
                endpoint.summary or endpoint.description or f"{method.upper()} {path}"
            )
            tools.append(RestApiTool(name=name, description=description, endpoint=endpoint))

        return tools

    def get_tools(self) -> List[RestApiTool]:
        """Get all tools from the toolkit.

        Returns:
            A list of REST API tools
        """
        return list(self.tools)

    def get_tool(self, name: str) -> Optional[RestApiTool]:
        """Get a tool by name; the first match wins.

        Args:
            name: Name of the tool

        Returns:
            The tool if found, None otherwise
        """
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        """Get schemas for all tools.

        Returns:
            A list of tool schemas
        """
        return [tool.to_schema() for tool in self.tools]

    async def invoke(self, tool: RestApiTool, args: Mapping[str, Any]) -> ToolCallResult:
        """Call the REST API behind a tool.

        Never raises: HTTP errors, transport failures and malformed responses
        all come back as a result flagged ``is_error``.

        Args:
            tool: Tool to call
            args: Call arguments

        Returns:
            The tool result
        """
        try:
            request = tool.build_request(args, self.base_url)
            logger.debug(f"Calling {tool.name}: {request.method} {request.url}")

            response = await self._client.request(
                request.method,
                request.url,
                params=request.query,
                json=request.body,
                headers=request.headers,
            )
            response.raise_for_status()
            return ToolCallResult.from_text(_pretty(_response_payload(response)))

        except httpx.HTTPStatusError as e:
            detail = (
                f"HTTP {e.response.status_code}: "
                f"{_pretty(_response_payload(e.response))}"
            )
        except Exception as e:
            detail = str(e) or e.__class__.__name__

        message = f"Error calling {tool.name}: {detail}"
        logger.error(message)
        return ToolCallResult.from_text(message, is_error=True)

    async def call_tool(
        self, name: str, args: Optional[Mapping[str, Any]] = None
    ) -> ToolCallResult:
        """Look up a tool by name and invoke it.

        Args:
            name: Name of the tool
            args: Call arguments

        Returns:
            The tool result

        Raises:
            ToolNotFoundError: If no tool has this name
        """
        tool = self.get_tool(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return await self.invoke(tool, args or {})


class FastMCPSwaggerTool(Tool):
    """Bridges RestApiTool -> FastMCP Tool object."""

    _rest_tool: RestApiTool = PrivateAttr()
    _toolkit: SwaggerToolkit = PrivateAttr()

    @classmethod
    def from_rest_tool(
        cls, rest_tool: RestApiTool, toolkit: SwaggerToolkit
    ) -> "FastMCPSwaggerTool":
        """Wrap a RestApiTool so FastMCP can list and call it.

        Args:
            rest_tool: RestApiTool instance to wrap
            toolkit: Toolkit that owns the HTTP client

        Returns:
            The FastMCP tool
        """
        tool = cls(
            name=rest_tool.name,
            description=rest_tool.description,
            parameters=rest_tool.input_schema,
        )
        tool._rest_tool = rest_tool
        tool._toolkit = toolkit
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        """Execute the tool.

        Error results are raised as ToolError, which FastMCP reports to the
        client as a result with ``isError`` set and the same text.

        Args:
            arguments: Parameters for the tool

        Returns:
            Tool execution result as MCP-compatible content
        """
        result = await self._toolkit.invoke(self._rest_tool, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return ToolResult(content=[TextContent(type="text", text=result.text)])
