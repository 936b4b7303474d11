"""HTTP response: a frozen result plus the mutable writer that builds it.

Plugins, loaders, and the built-in responders talk to ``ResponseWriter``.
The request handler calls ``finish()`` once to get the immutable
``Response`` that is handed back to the host.
"""

from __future__ import annotations

import json as json_module
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from folio.errors import PipelineError
from folio.http.cookies import SetCookie, encode_cookie_value


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    ``file_path`` is set for static file transfers; the host streams the
    file and ignores ``body``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()
    file_path: str | None = None

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Accessors --

    def header(self, name: str) -> str | None:
        """Return the last value set for header *name*, or ``None``."""
        name_lower = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == name_lower:
                return value
        return None

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)

    def header_items(self) -> list[tuple[str, str]]:
        """All headers including ``Content-Type`` and ``Set-Cookie``, for the wire."""
        items = [("Content-Type", self.content_type), *self.headers]
        items.extend(("Set-Cookie", cookie.to_header_value()) for cookie in self.cookies)
        return items


class ResponseWriter:
    """Mutable response facade for one request.

    Headers and cookies may be set at any time. Exactly one emission
    (``html``, ``json``, ``redirect``, ``file``) commits the response;
    a second emission raises ``PipelineError``. ``write`` buffers raw text
    that is placed ahead of any emitted HTML body.
    """

    __slots__ = ("_body", "_chunks", "_content_type", "_cookies", "_file", "_headers", "_status")

    def __init__(self) -> None:
        self._status: int | None = None
        self._headers: dict[str, tuple[str, str]] = {}
        self._cookies: list[SetCookie] = []
        self._chunks: list[str] = []
        self._body: str | None = None
        self._content_type = "text/html; charset=utf-8"
        self._file: str | None = None

    @property
    def committed(self) -> bool:
        """True once a response has been emitted."""
        return self._status is not None

    @property
    def status(self) -> int | None:
        return self._status

    def _commit(self, status: int) -> None:
        if self._status is not None:
            msg = f"Response already sent with status {self._status}"
            raise PipelineError(msg)
        self._status = status

    # -- Headers and cookies --

    def header(self, name: str, value: str | None = None) -> str:
        """Read a response header, or set it when *value* is given."""
        if value is None:
            entry = self._headers.get(name.lower())
            return entry[1] if entry else ""
        self._headers[name.lower()] = (name, value)
        return value

    def cookie(
        self,
        name: str,
        value: Any,
        *,
        path: str = "/",
        max_age: int | None = None,
        expires: str | None = None,
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = False,
        samesite: str | None = None,
    ) -> str:
        """Set a cookie. Non-string values are stored as JSON.

        Returns the serialized ``Set-Cookie`` header value.
        """
        cookie = SetCookie(
            name=name,
            value=encode_cookie_value(value),
            max_age=max_age,
            expires=expires,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
        )
        self._cookies.append(cookie)
        return cookie.to_header_value()

    # -- Emission --

    def write(self, text: str) -> None:
        """Buffer raw text ahead of the response body."""
        self._chunks.append(text)

    def html(self, status: int, text: str) -> None:
        """Emit an HTML response."""
        self._commit(status)
        self._content_type = "text/html; charset=utf-8"
        self._body = "".join(self._chunks) + text

    def json(self, status: int, data: Any) -> None:
        """Emit a JSON response."""
        self._commit(status)
        self._content_type = "application/json"
        self._body = json_module.dumps(data)

    def redirect(self, location: str, status: int = 302) -> None:
        """Emit a redirect to *location*."""
        self._commit(status)
        self.header("Location", location)
        self._body = ""

    def file(self, path: str | Path) -> None:
        """Emit a static file transfer for *path*."""
        self._commit(200)
        content_type, _ = mimetypes.guess_type(str(path))
        self._content_type = content_type or "application/octet-stream"
        self._file = str(path)
        self._body = ""

    def finish(self) -> Response:
        """Freeze the writer's state into a ``Response``."""
        body = self._body if self._body is not None else "".join(self._chunks)
        return Response(
            body=body,
            status=self._status or 200,
            content_type=self._content_type,
            headers=tuple(self._headers.values()),
            cookies=tuple(self._cookies),
            file_path=self._file,
        )
