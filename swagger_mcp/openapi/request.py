"""
Name: Request builder.
Description: Turns a tool's path template, parameter declarations and call arguments into a resolved HTTP request. Building is fail-open: missing required arguments, unresolved placeholders and type mismatches are passed through to the remote API, whose own error response is what the caller sees.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Sequence
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from ..constants import JSON_CONTENT_TYPE
from .models import ApiParameter, ParameterLocation, ResolvedRequest

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone on top of quote()'s defaults
_URI_COMPONENT_SAFE = "!*'()"


def stringify_value(value: Any) -> str:
    """Render an argument value the way it appears in a URL path."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_value(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def substitute_path(path: str, args: Mapping[str, Any]) -> str:
    """Replace ``{key}`` placeholders with percent-encoded argument values.

    Every argument is tried, declared or not. Placeholders without an argument
    are left as literal text.

    Args:
        path: Path template
        args: Call arguments

    Returns:
        The substituted path
    """
    for key, value in args.items():
        encoded = quote(stringify_value(value), safe=_URI_COMPONENT_SAFE)
        path = path.replace(f"{{{key}}}", encoded)
    return path


def build_url(path: str, base_url: str) -> str:
    """Join a substituted path onto the base URL.

    An absolute path is appended to the base URL's own path instead of
    replacing it, so ``https://host/api`` + ``/v1/x`` gives
    ``https://host/api/v1/x``. Relative paths resolve normally.

    Args:
        path: Substituted request path
        base_url: Base URL of the API

    Returns:
        The absolute request URL
    """
    if not path.startswith("/"):
        return urljoin(base_url, path)

    parts = urlsplit(base_url)
    base_path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return urlunsplit(
        (parts.scheme, parts.netloc, base_path + path[1:], parts.query, parts.fragment)
    )


def build_request(
    method: str,
    path: str,
    parameters: Sequence[ApiParameter],
    args: Mapping[str, Any],
    base_url: str,
) -> ResolvedRequest:
    """Build the HTTP request for one tool call.

    Args:
        method: HTTP method of the operation
        path: Path template of the operation
        parameters: Declared parameters of the operation
        args: Call arguments
        base_url: Base URL of the API

    Returns:
        The resolved request
    """
    url = build_url(substitute_path(path, args), base_url)

    query: Dict[str, Any] = {}
    body: Optional[Any] = None

    for param in parameters:
        if param.name not in args:
            continue
        value = args[param.name]

        if param.location == ParameterLocation.QUERY:
            query[param.name] = value
        elif param.location == ParameterLocation.BODY:
            if isinstance(value, Mapping):
                body = {**body, **value} if isinstance(body, dict) else dict(value)
            else:
                # Arrays and scalars cannot be merged; the value is the whole body.
                body = value
        elif param.location == ParameterLocation.PATH:
            # Already substituted into the URL.
            pass
        elif param.location in (
            ParameterLocation.HEADER,
            ParameterLocation.FORM_DATA,
            ParameterLocation.COOKIE,
        ):
            logger.debug(
                f"Parameter '{param.name}' in {param.location.value} is not sent"
            )

    headers = None
    if isinstance(body, (Mapping, list)) and not body:
        body = None
    if body is not None:
        headers = {"Content-Type": JSON_CONTENT_TYPE}

    return ResolvedRequest(
        method=method.upper(),
        url=url,
        query=query,
        body=body,
        headers=headers,
    )
