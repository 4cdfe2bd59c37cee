"""Custom exception hierarchy for jsonable-request."""
from __future__ import annotations

from typing import Any


class JsonableRequestError(RuntimeError):
    """Base error for template and dispatch failures."""

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.details = details


class TemplateError(JsonableRequestError):
    """Raised when a request template is structurally invalid."""


class MissingEndpointError(TemplateError):
    """Raised when a template does not define an endpoint."""


class IncompleteAuthError(TemplateError):
    """Raised when basic or digest auth lacks a username or password."""


class UnsupportedBodyFormatError(TemplateError):
    """Raised when no request encoding exists for a template's body format."""


class TemplateNotFoundError(JsonableRequestError):
    """Raised when a named template is missing from a registry."""
