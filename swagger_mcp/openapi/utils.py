"""Utility functions for turning Swagger operations into tool definitions."""

import re
from typing import Any, Dict, List, Optional, Sequence

from .models import ApiParameter

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")

_TYPE_MAP = {
    "integer": "number",
    "boolean": "boolean",
    "array": "array",
    "object": "object",
}


def map_swagger_type(swagger_type: Optional[str]) -> str:
    """Map a Swagger parameter type to a tool schema type.

    Anything not explicitly mapped (``string``, ``number``, ``file``, missing
    or unknown types) becomes ``string``.

    Args:
        swagger_type: Declared Swagger type

    Returns:
        JSON schema type for the tool input
    """
    return _TYPE_MAP.get(swagger_type, "string")


def _path_segment_to_name(segment: str) -> str:
    if segment.startswith("{") and segment.endswith("}"):
        return f"by_{segment[1:-1]}"
    return _NON_ALPHANUMERIC.sub("_", segment)


def generate_tool_name(
    prefix: str, method: str, path: str, operation: Dict[str, Any]
) -> str:
    """Generate a tool name for an operation.

    The operationId is used verbatim when present. Otherwise the name is built
    from the method and path, e.g. ``GET /v1/hosts/{name}`` becomes
    ``get_v1_hosts_by_name``. The root path yields ``get_``.

    Args:
        prefix: Prefix prepended to every name (already including its separator)
        method: HTTP method
        path: Path template
        operation: Raw Swagger operation object

    Returns:
        The tool name
    """
    operation_id = operation.get("operationId")
    if operation_id:
        return f"{prefix}{operation_id}"

    path_parts = [_path_segment_to_name(part) for part in path.split("/") if part]
    return f"{prefix}{method.lower()}_{'_'.join(path_parts)}"


def build_input_schema(parameters: Sequence[ApiParameter]) -> Dict[str, Any]:
    """Build the JSON schema describing a tool's arguments.

    Every parameter becomes a flat top-level property whatever its location,
    so body fields share the namespace of path and query parameters.

    Args:
        parameters: Parameters of the operation, in declaration order

    Returns:
        An object schema with properties and required names
    """
    properties: Dict[str, Dict[str, str]] = {}
    required: List[str] = []

    for param in parameters:
        properties[param.name] = {
            "type": map_swagger_type(param.declared_type),
            "description": param.description or f"{param.name} parameter",
        }
        if param.required:
            required.append(param.name)

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }
