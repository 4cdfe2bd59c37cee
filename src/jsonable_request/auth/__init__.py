"""Authentication strategies for templated requests."""
from __future__ import annotations

from ..template import AuthConfig
from .base import AuthStrategy
from .basic import BasicAuth
from .digest import DigestAuth
from .token import TokenAuth


def strategy_for(auth: AuthConfig) -> AuthStrategy | None:
    """Pick the strategy described by a template's ``auth`` section."""

    if auth.is_empty:
        return None
    has_credentials = auth.username is not None and auth.password is not None
    if auth.type == "basic":
        return BasicAuth(str(auth.username), str(auth.password))
    if auth.type == "digest":
        return DigestAuth(str(auth.username), str(auth.password))
    if auth.token is not None:
        return TokenAuth(str(auth.token))
    if auth.type is None and has_credentials:
        return BasicAuth(str(auth.username), str(auth.password))
    return None


__all__ = ["AuthStrategy", "BasicAuth", "DigestAuth", "TokenAuth", "strategy_for"]
