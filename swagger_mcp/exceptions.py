"""Exceptions raised by swagger-mcp."""


class SwaggerMCPError(Exception):
    """Base exception for all swagger-mcp errors."""


class ConfigurationError(SwaggerMCPError, ValueError):
    """The server configuration is incomplete or inconsistent."""


class SwaggerSpecError(SwaggerMCPError, ValueError):
    """The swagger document is missing, unparseable or has no paths."""


class ToolNotFoundError(SwaggerMCPError, LookupError):
    """A tool call named a tool that is not in the catalog."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool {tool_name} not found")
