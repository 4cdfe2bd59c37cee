"""Request template model and validation."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import IncompleteAuthError, MissingEndpointError, TemplateError

DEFAULT_METHOD = "POST"
CREDENTIAL_AUTH_TYPES = frozenset({"basic", "digest"})
_AUTH_FIELDS = ("type", "username", "password", "token")


@dataclass(slots=True)
class AuthConfig:
    """Credentials section of a template."""

    type: str | None = None
    username: Any | None = None
    password: Any | None = None
    token: Any | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> AuthConfig:
        if not payload:
            return cls()
        return cls(
            type=payload.get("type"),
            username=payload.get("username"),
            password=payload.get("password"),
            token=payload.get("token"),
            extra={
                key: copy.deepcopy(value)
                for key, value in payload.items()
                if key not in _AUTH_FIELDS
            },
        )

    @property
    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Return only the populated fields, in template order."""
        payload = {
            "type": self.type,
            "username": self.username,
            "password": self.password,
            "token": self.token,
        }
        result = {key: value for key, value in payload.items() if value is not None}
        result.update(self.extra)
        return result


@dataclass(slots=True)
class RequestTemplate:
    """A validated template with every optional field filled in."""

    endpoint: str
    method: str = DEFAULT_METHOD
    body_format: str = "json"
    headers: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    auth: AuthConfig = field(default_factory=AuthConfig)

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "method": self.method,
            "body_format": self.body_format,
            "headers": dict(self.headers),
            "data": copy.deepcopy(self.data),
            "auth": self.auth.to_dict(),
        }


def default_body_format(method: str) -> str:
    """GET requests carry their data in the query string; everything else in JSON."""
    return "query" if method.upper() == "GET" else "json"


def _expect_type(template: Mapping[str, Any], name: str, expected: type) -> None:
    value = template.get(name)
    if value is None or isinstance(value, expected):
        return
    kind = "a string" if expected is str else "an object"
    raise TemplateError(
        f"Request template '{name}' must be {kind}, got {type(value).__name__}.",
        details=name,
    )


def validate(template: Mapping[str, Any] | RequestTemplate) -> RequestTemplate:
    """Fill template defaults and reject structurally invalid input.

    Raises:
        MissingEndpointError: the template has no ``endpoint``.
        IncompleteAuthError: basic or digest auth without both credentials.
        TemplateError: a field has the wrong type.
    """

    if isinstance(template, RequestTemplate):
        template = template.to_dict()
    if not isinstance(template, Mapping):
        raise TemplateError(
            f"Request template must be a mapping, got {type(template).__name__}."
        )

    endpoint = template.get("endpoint")
    if endpoint is None:
        raise MissingEndpointError("Request template must define an 'endpoint'.")
    _expect_type(template, "endpoint", str)
    _expect_type(template, "method", str)
    _expect_type(template, "body_format", str)
    for name in ("headers", "data", "auth"):
        _expect_type(template, name, Mapping)

    method = template.get("method") or DEFAULT_METHOD
    body_format = template.get("body_format") or default_body_format(method)
    auth = AuthConfig.from_mapping(template.get("auth"))

    needs_credentials = isinstance(auth.type, str) and auth.type in CREDENTIAL_AUTH_TYPES
    if needs_credentials and (auth.username is None or auth.password is None):
        raise IncompleteAuthError(
            f"{auth.type.capitalize()} auth requires a username and a password.",
            details=auth.type,
        )

    return RequestTemplate(
        endpoint=endpoint,
        method=method,
        body_format=body_format,
        headers=dict(template.get("headers") or {}),
        data=copy.deepcopy(dict(template.get("data") or {})),
        auth=auth,
    )
