"""HTTP transport used to dispatch resolved templates."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, Protocol

from requests import Response, Session
from requests.auth import AuthBase, HTTPBasicAuth, HTTPDigestAuth

from .exceptions import UnsupportedBodyFormatError
from .interpolation import render_scalar

# body_format tag -> keyword argument of ``Session.request``
BODY_FORMATS: Mapping[str, str] = {
    "query": "params",
    "json": "json",
    "form_params": "data",
    "multipart": "files",
}


class HttpTransport(Protocol):
    """Capabilities the builder needs from an HTTP client."""

    def with_basic_auth(self, username: str, password: str) -> HttpTransport: ...

    def with_digest_auth(self, username: str, password: str) -> HttpTransport: ...

    def with_bearer_token(self, token: str) -> HttpTransport: ...

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, Any],
        body_format: str,
        body: Any,
    ) -> Response: ...


def body_keyword(body_format: str) -> str:
    """Return the ``requests`` keyword that carries a body of ``body_format``."""

    try:
        return BODY_FORMATS[body_format]
    except KeyError:
        supported = ", ".join(sorted(BODY_FORMATS))
        raise UnsupportedBodyFormatError(
            f"Unsupported body format '{body_format}' (expected one of: {supported}).",
            details=body_format,
        ) from None


def flatten_fields(body: Any, prefix: str | None = None) -> list[tuple[str, str]]:
    """Flatten nested data into ``(name, text)`` pairs using bracketed keys.

    ``{"filter": {"role": "admin"}, "ids": [1, 2]}`` becomes
    ``[("filter[role]", "admin"), ("ids[0]", "1"), ("ids[1]", "2")]``.
    """

    if isinstance(body, Mapping):
        items = [(str(key), value) for key, value in body.items()]
    elif isinstance(body, Sequence) and not isinstance(body, (str, bytes, bytearray)):
        items = [(str(index), value) for index, value in enumerate(body)]
    else:
        if prefix is None:
            raise UnsupportedBodyFormatError(
                f"Cannot encode a {type(body).__name__} body as fields.", details=body
            )
        return [(prefix, render_scalar(body))]

    fields: list[tuple[str, str]] = []
    for key, value in items:
        name = key if prefix is None else f"{prefix}[{key}]"
        fields.extend(flatten_fields(value, name))
    return fields


def encode_body(body_format: str, body: Any) -> dict[str, Any]:
    """Return the ``Session.request`` keyword arguments carrying ``body``."""

    keyword = body_keyword(body_format)
    if keyword == "json":
        return {"json": body}
    fields = flatten_fields(body)
    if keyword == "files":
        return {"files": [(name, (None, value)) for name, value in fields]}
    return {keyword: fields}


class PendingRequest:
    """A single outgoing request built on a `requests.Session`."""

    def __init__(
        self,
        session: Session,
        *,
        timeout: float | tuple[float, float] | None = None,
        verify: bool | str = True,
    ) -> None:
        self._session = session
        self._timeout = timeout
        self._verify = verify
        self._auth: AuthBase | None = None
        self._headers: MutableMapping[str, str] = {}

    def with_basic_auth(self, username: str, password: str) -> PendingRequest:
        self._auth = HTTPBasicAuth(username, password)
        return self

    def with_digest_auth(self, username: str, password: str) -> PendingRequest:
        self._auth = HTTPDigestAuth(username, password)
        return self

    def with_bearer_token(self, token: str) -> PendingRequest:
        self._headers["Authorization"] = f"Bearer {token}"
        return self

    @property
    def auth(self) -> AuthBase | None:
        return self._auth

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, Any],
        body_format: str,
        body: Any,
    ) -> Response:
        options = encode_body(body_format, body)
        merged_headers = {key: str(value) for key, value in headers.items()}
        merged_headers.update(self._headers)
        return self._session.request(
            method=method.upper(),
            url=url,
            headers=merged_headers,
            auth=self._auth,
            timeout=self._timeout,
            verify=self._verify,
            **options,
        )


def parse_json(response: Response) -> Any:
    """Return the decoded JSON body, or the raw text when it is not JSON."""

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
