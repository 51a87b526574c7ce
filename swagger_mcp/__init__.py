"""swagger-mcp: serve REST APIs described by Swagger documents as MCP tools."""

__version__ = "1.0.0"
