"""Swagger handling module for swagger-mcp."""

from .models import ApiEndpoint, ApiParameter, ClientConfig, ResolvedRequest, ToolCallResult
from .request import build_request, build_url
from .spec import SwaggerSpecParser
from .tools import FastMCPSwaggerTool, RestApiTool, SwaggerToolkit
from .utils import build_input_schema, generate_tool_name, map_swagger_type

__all__ = [
    "ApiEndpoint",
    "ApiParameter",
    "ClientConfig",
    "ResolvedRequest",
    "ToolCallResult",
    "build_request",
    "build_url",
    "SwaggerSpecParser",
    "FastMCPSwaggerTool",
    "RestApiTool",
    "SwaggerToolkit",
    "build_input_schema",
    "generate_tool_name",
    "map_swagger_type",
]
