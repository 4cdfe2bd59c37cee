"""HTTP Basic authentication support."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .base import AuthStrategy

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..http import HttpTransport


@dataclass(slots=True)
class BasicAuth(AuthStrategy):
    """Send HTTP Basic credentials."""

    username: str
    password: str

    def apply(self, request: HttpTransport) -> None:
        request.with_basic_auth(self.username, self.password)
