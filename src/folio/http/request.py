"""Immutable HTTP request facade.

Frozen metadata with cached body access. Cookies are parsed lazily, once
per request, the first time anything asks for them.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, overload

from folio.errors import BadRequest
from folio.http.cookies import decode_cookie_value, parse_cookies
from folio.http.forms import FormData, parse_form_data
from folio.http.headers import Headers
from folio.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    The body is held as bytes; ``.json()`` and ``.form()`` parse it once
    and cache the result.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    raw_body: bytes = b""
    auth: Any = None

    # Private: mutable cache for parsed cookies, JSON, and form data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    # -- Computed properties --

    @property
    def url(self) -> str:
        """Request URL (path + query string)."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def header(self, name: str) -> str:
        """Return a header value, or ``""`` when absent."""
        return self.headers.get(name) or ""

    # -- Cookies --

    @overload
    def cookies(self) -> Mapping[str, Any]: ...

    @overload
    def cookies(self, name: str) -> Any: ...

    def cookies(self, name: str | None = None) -> Any:
        """Return all cookies, or one by name (``None`` if missing).

        Values that parse as JSON come back as structured data.
        """
        parsed = self._cache.get("_cookies")
        if parsed is None:
            raw = parse_cookies(self.header("cookie"))
            parsed = {key: decode_cookie_value(value) for key, value in raw.items()}
            self._cache["_cookies"] = parsed
        if name is None:
            return parsed
        return parsed.get(name)

    # -- Body access --

    def body(self) -> bytes:
        """The raw request body."""
        return self.raw_body

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.raw_body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises ``BadRequest`` if the body is not valid JSON.
        """
        if "_json" not in self._cache:
            try:
                self._cache["_json"] = json.loads(self.raw_body or b"null")
            except ValueError as exc:
                raise BadRequest(f"Malformed JSON body: {exc}") from exc
        return self._cache["_json"]

    def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart)."""
        if "_form" not in self._cache:
            ct = self.content_type or "application/x-www-form-urlencoded"
            self._cache["_form"] = parse_form_data(self.raw_body, ct)
        return self._cache["_form"]

    def form_data(self) -> Mapping[str, Any]:
        """Body as a mapping, whatever the encoding.

        JSON bodies are returned parsed; form bodies are flattened to their
        first value per field.
        """
        ct = (self.content_type or "").lower()
        if "json" in ct:
            data = self.json()
            return data if isinstance(data, Mapping) else {}
        if not self.raw_body:
            return {}
        form = self.form()
        return {key: form[key] for key in form}

    # -- Factory --

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any], *, auth: Any = None) -> Request:
        """Create a Request from a WSGI environ."""
        length = environ.get("CONTENT_LENGTH") or "0"
        try:
            size = int(length)
        except ValueError:
            size = 0
        stream = environ.get("wsgi.input")
        body = stream.read(size) if stream is not None and size > 0 else b""
        path = environ.get("PATH_INFO") or "/"
        return cls(
            method=environ.get("REQUEST_METHOD", "GET"),
            path=path,
            headers=Headers.from_environ(environ),
            query=QueryParams(environ.get("QUERY_STRING", "")),
            raw_body=body,
            auth=auth,
        )
