"""Bearer token authentication."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .base import AuthStrategy

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..http import HttpTransport


@dataclass(slots=True)
class TokenAuth(AuthStrategy):
    """Apply an already issued bearer token."""

    token: str

    def apply(self, request: HttpTransport) -> None:
        request.with_bearer_token(self.token)
