"""Resolve request templates and dispatch them over HTTP."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .auth import strategy_for
from .config import BuilderConfig
from .http import HttpTransport, PendingRequest
from .interpolation import find_placeholders, interpolate, substitute
from .template import AuthConfig, RequestTemplate, validate

logger = logging.getLogger(__name__)

TemplateInput = Mapping[str, Any] | RequestTemplate
RequestFactory = Callable[[], HttpTransport]


class RequestBuilderContract(Protocol):
    """Public surface shared by request builders."""

    def parse(self, template: TemplateInput, data: Mapping[str, Any]) -> RequestTemplate: ...

    def send(
        self, template: TemplateInput, data: Mapping[str, Any] | None = None
    ) -> requests.Response: ...


class RequestBuilder:
    """Turn templates plus data records into HTTP requests."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        verify_ssl: bool | str = True,
        default_headers: Mapping[str, str] | None = None,
        coerce_numeric_strings: bool = False,
        session: requests.Session | None = None,
        request_factory: RequestFactory | None = None,
    ) -> None:
        self.config = BuilderConfig(
            timeout=timeout,
            verify_ssl=verify_ssl,
            default_headers=default_headers,
            coerce_numeric_strings=coerce_numeric_strings,
        )
        self._suppress_insecure_warning_if_needed()
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._request_factory = request_factory or self._new_request

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> RequestBuilder:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Public API --------------------------------------------------------------
    def validate(self, template: TemplateInput) -> RequestTemplate:
        return validate(template)

    def parse(self, template: TemplateInput, data: Mapping[str, Any]) -> RequestTemplate:
        """Validate ``template`` and substitute placeholders from ``data``.

        ``endpoint``, ``headers`` and ``auth`` values are rendered as text. ``data``
        is resolved recursively and keeps the type of values referenced by an
        exact ``{{name}}`` placeholder.
        """
        validated = validate(template)
        resolved = RequestTemplate(
            endpoint=substitute(validated.endpoint, data),
            method=validated.method,
            body_format=validated.body_format,
            headers=self._interpolate_text_values(validated.headers, data),
            data=interpolate(
                validated.data,
                data,
                coerce_numeric_strings=self.config.coerce_numeric_strings,
            ),
            auth=self._interpolate_auth(validated.auth, data),
        )
        if logger.isEnabledFor(logging.DEBUG):
            unresolved = [
                name for name in find_placeholders(validated.to_dict()) if name not in data
            ]
            if unresolved:
                logger.debug("Unresolved placeholders left in template: %s", ", ".join(unresolved))
        return resolved

    def send(
        self, template: TemplateInput, data: Mapping[str, Any] | None = None
    ) -> requests.Response:
        """Resolve ``template`` when ``data`` is given, then dispatch it.

        The response is returned as-is; error statuses are not raised and
        transport failures propagate from `requests`.
        """
        resolved = self.parse(template, data) if data else self.validate(template)
        request = self._request_factory()
        strategy = strategy_for(resolved.auth)
        if strategy is not None:
            strategy.apply(request)
        self._log_request(resolved)
        return request.send(
            resolved.method,
            resolved.endpoint,
            headers=self.config.resolved_headers(resolved.headers),
            body_format=resolved.body_format,
            body=resolved.data,
        )

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    # Internal helpers -------------------------------------------------------
    def _new_request(self) -> PendingRequest:
        return PendingRequest(
            self._session,
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
        )

    @staticmethod
    def _interpolate_text_values(values: Mapping[str, Any], data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            key: substitute(value, data) if isinstance(value, str) else value
            for key, value in values.items()
        }

    def _interpolate_auth(self, auth: AuthConfig, data: Mapping[str, Any]) -> AuthConfig:
        if auth.is_empty:
            return AuthConfig()
        fields = auth.to_dict()
        auth_type = fields.pop("type", None)
        resolved = self._interpolate_text_values(fields, data)
        if auth_type is not None:
            resolved["type"] = auth_type
        return AuthConfig.from_mapping(resolved)

    @staticmethod
    def _log_request(template: RequestTemplate) -> None:
        logger.info(
            "Templated request %s %s (body_format=%s)",
            template.method.upper(),
            template.endpoint,
            template.body_format,
        )

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)
