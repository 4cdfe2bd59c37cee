"""Base abstractions for auth strategies."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..http import HttpTransport


class AuthStrategy(ABC):
    """Interface each authentication mechanism must implement."""

    @abstractmethod
    def apply(self, request: HttpTransport) -> None:
        """Attach credentials to the outgoing request."""
