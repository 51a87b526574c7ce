"""Common models for Swagger tools."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParameterLocation(str, Enum):
    """Where a parameter travels in the HTTP request (Swagger ``in``)."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"
    HEADER = "header"
    # Accepted so real-world documents parse; never collected into a request.
    FORM_DATA = "formData"
    COOKIE = "cookie"


class ApiParameter(BaseModel):
    """Parameter for an API request."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    required: bool = False
    location: ParameterLocation
    type: Optional[str] = None
    schema_definition: Dict[str, Any] = Field(default_factory=dict)

    @property
    def declared_type(self) -> str:
        """Swagger type of the parameter, looking inside ``schema`` for body params."""
        return self.type or self.schema_definition.get("type") or "string"


class ApiEndpoint(BaseModel):
    """Endpoint for an API request."""

    model_config = ConfigDict(frozen=True)

    operation_id: Optional[str] = None
    method: str  # get, post, put, delete, patch
    path: str
    summary: str = ""
    description: str = ""
    parameters: List[ApiParameter] = Field(default_factory=list)


class ResolvedRequest(BaseModel):
    """A fully resolved HTTP request, built fresh for every tool call."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    query: Dict[str, Any] = Field(default_factory=dict)
    body: Optional[Any] = None
    headers: Optional[Dict[str, str]] = None


class ToolCallResult(BaseModel):
    """Outcome of a tool call in the shape the MCP layer expects."""

    content: List[Dict[str, Any]]
    is_error: bool = False

    @classmethod
    def from_text(cls, text: str, is_error: bool = False) -> "ToolCallResult":
        return cls(content=[{"type": "text", "text": text}], is_error=is_error)

    @property
    def text(self) -> str:
        """Concatenated text of all text content items."""
        return "\n".join(
            item.get("text", "") for item in self.content if item.get("type") == "text"
        )


class ClientConfig(BaseModel):
    """HTTP client settings shared by every outbound call.

    Fixed once at startup and passed into the toolkit.
    """

    model_config = ConfigDict(frozen=True)

    ignore_ssl: bool = Field(
        default=False, description="Skip TLS certificate verification"
    )
    auth_header: Optional[str] = Field(
        default=None,
        description="Static value sent as the Authorization header",
    )
    timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds (None keeps httpx default)"
    )

    @property
    def verify(self) -> bool:
        return not self.ignore_ssl

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": self.auth_header} if self.auth_header else {}
