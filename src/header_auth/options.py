"""Configuration for header authentication."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from header_auth.constants import DEFAULT_HEADER_NAME
from header_auth.handler import NeverAuthenticateHandler
from header_auth.protocol import HeaderHandler


class HeaderAuthenticationOptions(BaseModel):
    """Configures header-based authentication.

    Validated on construction, so a misconfiguration surfaces as a
    ``pydantic.ValidationError`` at start-up rather than on a request.

    Attributes:
        header_name: Name of the header carrying the credentials.
        header_handler: Handler that authenticates the header values. Defaults
            to a handler that never succeeds; replace it with e.g. a
            ``SchemeHandler`` around a ``TokenVerifier``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    header_name: str = DEFAULT_HEADER_NAME
    header_handler: Any = Field(default_factory=NeverAuthenticateHandler)

    @field_validator("header_name")
    @classmethod
    def _check_header_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("header_name must not be empty")
        return value

    @field_validator("header_handler")
    @classmethod
    def _check_header_handler(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("header_handler must be set")
        if not isinstance(value, HeaderHandler):
            raise ValueError(f"header_handler must implement HeaderHandler, got {type(value).__name__}")
        return value
