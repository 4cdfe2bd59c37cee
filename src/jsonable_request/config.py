"""Configuration helpers for jsonable-request."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import TemplateError, TemplateNotFoundError

DEFAULT_TEMPLATE_NAME = "default"


@dataclass(slots=True)
class BuilderConfig:
    """Typed configuration for `RequestBuilder`."""

    timeout: float = 30.0
    verify_ssl: bool | str = True
    default_headers: Mapping[str, str] | None = None
    coerce_numeric_strings: bool = False

    def resolved_headers(self, template_headers: Mapping[str, Any]) -> dict[str, Any]:
        headers: dict[str, Any] = dict(self.default_headers or {})
        headers.update(template_headers)
        return headers


@dataclass(slots=True)
class TemplateRegistry:
    """Named request templates loaded from a JSON document.

    The document maps template names to template objects::

        {"create_user": {"endpoint": "https://api.example.com/users", ...}}

    A document holding a single template (with a top-level ``endpoint``) is
    registered under ``"default"``.
    """

    templates: dict[str, dict[str, Any]] = field(default_factory=dict)
    source: Path | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], *, source: Path | None = None) -> TemplateRegistry:
        if "endpoint" in payload:
            return cls(templates={DEFAULT_TEMPLATE_NAME: dict(payload)}, source=source)
        templates: dict[str, dict[str, Any]] = {}
        for name, template in payload.items():
            if not isinstance(template, Mapping):
                raise TemplateError(
                    f"Template '{name}' must be an object, got {type(template).__name__}.",
                    details=name,
                )
            templates[name] = dict(template)
        return cls(templates=templates, source=source)

    @classmethod
    def from_path(cls, path: str | Path) -> TemplateRegistry:
        template_path = Path(path).expanduser()
        try:
            content = json.loads(template_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise TemplateError(f"{template_path} is not valid JSON: {exc}") from exc
        if not isinstance(content, Mapping):
            raise TemplateError(f"{template_path} must contain a JSON object.")
        return cls.from_mapping(content, source=template_path)

    def names(self) -> list[str]:
        return list(self.templates)

    def get(self, name: str | None = None) -> dict[str, Any]:
        """Return a template by name, or the only template when ``name`` is omitted."""
        if name is None:
            if len(self.templates) == 1:
                return dict(next(iter(self.templates.values())))
            name = DEFAULT_TEMPLATE_NAME
        try:
            return dict(self.templates[name])
        except KeyError:
            available = ", ".join(self.names()) or "none"
            raise TemplateNotFoundError(
                f"Template '{name}' not found (available: {available}).", details=name
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self.templates
