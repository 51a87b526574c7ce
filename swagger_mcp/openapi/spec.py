"""
Name: Swagger specification parser.
Description: Provides the SwaggerSpecParser class for dereferencing a Swagger 2.0 document, deriving the API base URL from it, and walking its path/method matrix to extract the operations that become tools.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..constants import (
    DEFAULT_API_HOST,
    DEFAULT_BASE_PATH,
    DEFAULT_SCHEME,
    SUPPORTED_METHODS,
)
from ..exceptions import SwaggerSpecError

logger = logging.getLogger(__name__)


def resolve_references(swagger_doc: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively resolve all internal $ref references in a Swagger document.

    Handles circular references by dropping the ``$ref`` at the point the
    cycle closes.

    Args:
        swagger_doc: The Swagger document as a dictionary

    Returns:
        A dereferenced deep copy of the document

    Raises:
        SwaggerSpecError: If the document uses an external reference
    """
    swagger_doc = copy.deepcopy(swagger_doc)
    resolved_cache: Dict[str, Any] = {}

    def resolve_ref(ref_string: str) -> Optional[Any]:
        parts = ref_string.split("/")
        if parts[0] != "#":
            raise SwaggerSpecError(f"External references not supported: {ref_string}")

        current = swagger_doc
        for part in parts[1:]:
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return None
        return current

    def recursive_resolve(obj: Any, seen_refs: frozenset) -> Any:
        if isinstance(obj, dict):
            ref_string = obj.get("$ref")
            if isinstance(ref_string, str):
                if ref_string in resolved_cache:
                    return copy.deepcopy(resolved_cache[ref_string])

                # Cycle: keep the structure but stop following the reference
                if ref_string in seen_refs:
                    return {k: v for k, v in obj.items() if k != "$ref"}

                target = resolve_ref(ref_string)
                if target is None:
                    logger.warning(f"Unresolvable reference: {ref_string}")
                    return obj

                resolved = recursive_resolve(target, seen_refs | {ref_string})
                resolved_cache[ref_string] = resolved
                return copy.deepcopy(resolved)

            return {key: recursive_resolve(value, seen_refs) for key, value in obj.items()}

        if isinstance(obj, list):
            return [recursive_resolve(item, seen_refs) for item in obj]

        return obj

    return recursive_resolve(swagger_doc, frozenset())


def _merge_parameters(
    path_params: List[Dict[str, Any]], operation_params: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Combine path-level and operation-level parameters.

    Operation parameters override path-level ones with the same name and
    location; order is path-level first, then operation-level.
    """
    if not path_params:
        return list(operation_params)

    overridden = {(p.get("name"), p.get("in")) for p in operation_params}
    merged = [p for p in path_params if (p.get("name"), p.get("in")) not in overridden]
    return merged + list(operation_params)


class SwaggerSpecParser:
    """Parser for Swagger 2.0 documents."""

    def __init__(self, spec: Optional[Dict[str, Any]], dereference: bool = True):
        """Initialize the parser with a Swagger document.

        Args:
            spec: The Swagger document as a dictionary
            dereference: Whether to resolve $ref references first

        Raises:
            SwaggerSpecError: If the document is missing or has no paths
        """
        if not isinstance(spec, dict):
            raise SwaggerSpecError("No swagger document loaded")

        if "openapi" in spec:
            logger.warning(
                f"Document declares OpenAPI {spec['openapi']}; only Swagger 2.0 "
                "fields (schemes, host, basePath, parameter 'in') are interpreted"
            )

        self.spec = resolve_references(spec) if dereference else spec

        if not isinstance(self.spec.get("paths"), dict):
            raise SwaggerSpecError("No valid swagger document loaded: missing 'paths'")

    @property
    def title(self) -> str:
        return self.spec.get("info", {}).get("title", "")

    @property
    def description(self) -> str:
        return self.spec.get("info", {}).get("description", "")

    def get_base_url(self) -> str:
        """Derive the base URL from the document's schemes, host and basePath.

        Returns:
            The base URL for API requests
        """
        schemes = self.spec.get("schemes") or [DEFAULT_SCHEME]
        host = self.spec.get("host") or DEFAULT_API_HOST
        base_path = self.spec.get("basePath") or DEFAULT_BASE_PATH
        return f"{schemes[0]}://{host}{base_path}"

    def get_operations(self) -> List[Tuple[str, str, Dict[str, Any]]]:
        """Get all operations that can become tools, in document order.

        Methods other than get, post, put, delete and patch are skipped.
        Each returned operation carries the merged parameter list.

        Returns:
            A list of (path, method, operation) tuples
        """
        operations = []

        for path, path_item in self.spec["paths"].items():
            if not isinstance(path_item, dict):
                continue
            path_params = path_item.get("parameters") or []
            if not isinstance(path_params, list):
                raise SwaggerSpecError(f"Path-level parameters of {path} must be a list")

            for method, operation in path_item.items():
                if method not in SUPPORTED_METHODS:
                    if method != "parameters":
                        logger.debug(
                            f"Skipping {method.upper()} {path}: method not supported"
                        )
                    continue

                if operation is None:
                    operation = {}
                if not isinstance(operation, dict):
                    raise SwaggerSpecError(
                        f"Operation {method.upper()} {path} must be a mapping"
                    )

                operation_params = operation.get("parameters") or []
                if not isinstance(operation_params, list):
                    raise SwaggerSpecError(
                        f"Parameters of {method.upper()} {path} must be a list"
                    )
                if not all(isinstance(p, dict) for p in path_params + operation_params):
                    raise SwaggerSpecError(
                        f"Parameters of {method.upper()} {path} must be mappings"
                    )

                operation = dict(operation)
                operation["parameters"] = _merge_parameters(path_params, operation_params)
                operations.append((path, method, operation))

        return operations
