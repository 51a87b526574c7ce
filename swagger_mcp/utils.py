"""
Name: Utility functions.
Description: Common utility functions for swagger-mcp, including the server configuration model, loading Swagger documents from files and URLs, and logging.
"""

import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import requests
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_SPEC_FETCH_TIMEOUT,
    ENV_AUTH_HEADER,
    ENV_BASE_URL,
    ENV_IGNORE_SSL,
    ENV_SWAGGER_FILE,
    ENV_SWAGGER_URL,
    ENV_TOOL_PREFIX,
)
from .exceptions import ConfigurationError, SwaggerSpecError
from .openapi.models import ClientConfig

# Configure logging
logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False):
    """Configure logging for the application.

    Logs go to stderr because stdout carries the stdio MCP transport.

    Args:
        debug: Whether to enable debug mode
    """
    logging_level = logging.DEBUG if debug else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(logging_level)

    # Check if handlers are already configured to prevent duplicates
    if root_logger.handlers:
        for handler in root_logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setLevel(logging_level)
        return

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


class ServerConfig(BaseModel):
    """Configuration for a swagger-mcp server.

    Enumerated once at startup from the command line and environment and
    immutable afterwards.
    """

    model_config = ConfigDict(frozen=True)

    swagger_url: Optional[str] = Field(
        default=None, description="URL of the swagger document"
    )
    swagger_file: Optional[str] = Field(
        default=None, description="Path to a local swagger document"
    )
    tool_prefix: Optional[str] = Field(
        default=None, description="Prefix for generated tool names"
    )
    base_url: Optional[str] = Field(
        default=None, description="Override for the API base URL"
    )
    ignore_ssl: bool = Field(
        default=False, description="Skip TLS certificate verification"
    )
    auth_header: Optional[str] = Field(
        default=None, description="Authorization header value, e.g. 'Bearer token'"
    )

    @classmethod
    def from_env(cls, **overrides: Any) -> "ServerConfig":
        """Build a config from environment variables (and .env), then overrides.

        Overrides set to None fall back to the environment value.

        Args:
            **overrides: Field values taken from the command line

        Returns:
            Server configuration
        """
        load_dotenv()

        data: Dict[str, Any] = {
            "swagger_url": os.environ.get(ENV_SWAGGER_URL) or None,
            "swagger_file": os.environ.get(ENV_SWAGGER_FILE) or None,
            "tool_prefix": os.environ.get(ENV_TOOL_PREFIX) or None,
            "base_url": os.environ.get(ENV_BASE_URL) or None,
            "ignore_ssl": _env_flag(os.environ.get(ENV_IGNORE_SSL)),
            "auth_header": os.environ.get(ENV_AUTH_HEADER) or None,
        }
        for key, value in overrides.items():
            if key not in cls.model_fields:
                raise ConfigurationError(f"Unknown configuration option: {key}")
            if value is None:
                continue
            if key == "ignore_ssl":
                # A flag left off on the command line keeps the env value
                value = value or data["ignore_ssl"]
            data[key] = value

        return cls(**data)

    @property
    def client_config(self) -> ClientConfig:
        """HTTP client settings derived from this configuration."""
        return ClientConfig(ignore_ssl=self.ignore_ssl, auth_header=self.auth_header)

    def require_source(self):
        """Ensure a swagger document source is configured.

        Raises:
            ConfigurationError: If neither a URL nor a file is configured
        """
        if not self.swagger_url and not self.swagger_file:
            raise ConfigurationError(
                "Either --swagger-url or --swagger-file must be provided"
            )
        if self.swagger_url and self.swagger_file:
            logger.warning(
                f"Both a swagger URL and file are configured; using {self.swagger_url}"
            )


def _parse_document(text: str, hint: str = "") -> Dict[str, Any]:
    """Parse a document as JSON or YAML, trying JSON first when the hint is unclear."""
    if hint.endswith((".yaml", ".yml")):
        return yaml.safe_load(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError:
            raise ValueError("Unable to parse document as JSON or YAML")


def load_spec_from_file(file_path: str) -> Dict[str, Any]:
    """Load a swagger document from a file.

    Args:
        file_path: Path to the swagger document (.json, .yaml or .yml)

    Returns:
        Dict containing the swagger document
    """
    _, ext = os.path.splitext(file_path)
    with open(file_path, "r", encoding="utf-8") as f:
        if ext.lower() == ".json":
            return json.load(f)
        return _parse_document(f.read(), ext.lower())


def load_spec_from_url(
    url: str, client_config: Optional[ClientConfig] = None
) -> Dict[str, Any]:
    """Load a swagger document from a URL.

    Uses the same TLS policy and Authorization header as API calls.

    Args:
        url: URL to the swagger document
        client_config: HTTP client settings

    Returns:
        Dict containing the swagger document
    """
    client_config = client_config or ClientConfig()
    response = requests.get(
        url,
        headers=client_config.headers,
        verify=client_config.verify,
        timeout=DEFAULT_SPEC_FETCH_TIMEOUT,
    )
    response.raise_for_status()
    content_type = response.headers.get("Content-Type", "")

    if "application/json" in content_type:
        return response.json()
    if "yaml" in content_type:
        return yaml.safe_load(response.text)
    return _parse_document(response.text, url.lower())


def load_swagger_document(config: ServerConfig) -> Dict[str, Any]:
    """Load the swagger document named by the configuration.

    Args:
        config: Server configuration

    Returns:
        The parsed (not yet dereferenced) swagger document

    Raises:
        ConfigurationError: If no document source is configured
        SwaggerSpecError: If the document cannot be fetched or parsed
    """
    config.require_source()

    try:
        if config.swagger_url:
            logger.info(f"Loading swagger from URL: {config.swagger_url}")
            document = load_spec_from_url(config.swagger_url, config.client_config)
        else:
            logger.info(f"Loading swagger from file: {config.swagger_file}")
            document = load_spec_from_file(config.swagger_file)
    except (OSError, ValueError, yaml.YAMLError, requests.RequestException) as e:
        raise SwaggerSpecError(f"Failed to load swagger document: {e}") from e

    if not isinstance(document, dict):
        raise SwaggerSpecError(
            "Failed to load swagger document: top level is not a mapping"
        )

    logger.info("Successfully loaded and parsed swagger document")
    return document


def _coerce_value(value: str, schema_type: Optional[str], name: str) -> Any:
    """Convert a command-line string to the type the tool schema expects."""
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]

    if schema_type == "number":
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            logger.warning(
                f"'{value}' is not a valid number for {name}, using as string"
            )
            return value

    if schema_type == "boolean":
        lowered = value.lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        logger.warning(
            f"'{value}' is not a valid boolean for {name}, using as string"
        )
        return value

    if schema_type == "array":
        try:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            pass
        return [item.strip() for item in value.split(",")]

    if schema_type == "object":
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"'{value}' is not valid JSON for {name}, using as string")

    return value


def parse_tool_arguments(input_schema: Dict[str, Any], raw_args: List[str]) -> Dict[str, Any]:
    """Turn command-line arguments into a tool argument bag.

    A single argument starting with ``{`` is read as a JSON object. Otherwise
    each argument is a ``name=value`` pair whose value is converted according
    to the tool's input schema. Missing required parameters only produce a
    warning; the remote API decides whether the call is valid.

    Args:
        input_schema: The tool's input schema
        raw_args: Arguments as given on the command line

    Returns:
        The argument bag

    Raises:
        ValueError: If an argument is neither JSON nor a name=value pair
    """
    properties = input_schema.get("properties", {})
    required = input_schema.get("required", [])

    if len(raw_args) == 1 and raw_args[0].lstrip().startswith("{"):
        try:
            parsed = json.loads(raw_args[0])
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON arguments: {e}") from e
        if not isinstance(parsed, dict):
            raise ValueError("JSON arguments must be an object")
        return parsed

    arguments: Dict[str, Any] = {}
    for raw in raw_args:
        name, sep, value = raw.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected name=value, got '{raw}'")
        if name not in properties:
            logger.warning(f"'{name}' is not a parameter of this tool, sending as string")
        schema_type = properties.get(name, {}).get("type")
        arguments[name] = _coerce_value(value, schema_type, name)

    missing = [name for name in required if name not in arguments]
    if missing:
        logger.warning(
            f"Missing required parameters: {', '.join(missing)}. "
            f"Available parameters: {', '.join(properties)}"
        )

    return arguments


def setup_environment(debug: bool = False):
    """Setup the environment for the application.

    - Configures logging
    - Loads environment variables from .env file
    """
    configure_logging(debug)
    load_dotenv()
    logger.debug("Loaded environment variables from .env file")
