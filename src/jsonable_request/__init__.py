"""Declarative HTTP request templates with type-preserving placeholders."""
from .builder import RequestBuilder, RequestBuilderContract
from .config import BuilderConfig, TemplateRegistry
from .exceptions import (
    IncompleteAuthError,
    JsonableRequestError,
    MissingEndpointError,
    TemplateError,
)
from .interpolation import interpolate
from .template import AuthConfig, RequestTemplate, validate

__all__ = [
    "AuthConfig",
    "BuilderConfig",
    "IncompleteAuthError",
    "JsonableRequestError",
    "MissingEndpointError",
    "RequestBuilder",
    "RequestBuilderContract",
    "RequestTemplate",
    "TemplateError",
    "TemplateRegistry",
    "interpolate",
    "validate",
]
