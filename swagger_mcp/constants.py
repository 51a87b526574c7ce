"""
Name: Constants and settings.
Description: Centralized location for constants and settings used throughout swagger-mcp.
This file contains default values, environment variable names, and other constants to maintain consistency.
"""


# Server settings
SERVER_NAME = "swagger-mcp-server"
DEFAULT_TRANSPORT = "stdio"
SUPPORTED_TRANSPORTS = ["stdio", "sse", "http"]
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000

# Swagger document defaults used when deriving the base URL
DEFAULT_SCHEME = "https"
DEFAULT_API_HOST = "localhost"
DEFAULT_BASE_PATH = ""

# Operations that become tools
SUPPORTED_METHODS = ["get", "post", "put", "delete", "patch"]

# Tool settings
TOOL_PREFIX_SEPARATOR = "_"
JSON_CONTENT_TYPE = "application/json"

# HTTP client settings (None keeps the httpx default)
DEFAULT_HTTP_TIMEOUT = None
DEFAULT_SPEC_FETCH_TIMEOUT = 30

# Environment variables
ENV_SWAGGER_URL = "SWAGGER_URL"
ENV_SWAGGER_FILE = "SWAGGER_FILE"
ENV_TOOL_PREFIX = "SWAGGER_TOOL_PREFIX"
ENV_BASE_URL = "SWAGGER_BASE_URL"
ENV_IGNORE_SSL = "SWAGGER_IGNORE_SSL"
ENV_AUTH_HEADER = "SWAGGER_AUTH_HEADER"
