"""WSGI adapter — hands ``App.handle`` results to a WSGI host.

Pass-through requests (no route matched) go to the fallback application
when one is given, otherwise get a plain 404.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from folio.http.request import Request
from folio.http.response import Response

if TYPE_CHECKING:
    from folio.app import App

type StartResponse = Callable[..., Any]
type WSGIApp = Callable[[dict[str, Any], StartResponse], Iterable[bytes]]

_PHRASES: dict[int, str] = {status.value: status.phrase for status in HTTPStatus}

_CHUNK_SIZE = 64 * 1024


def status_line(status: int) -> str:
    """``"404 Not Found"`` style status line for *status*."""
    phrase = _PHRASES.get(status, "")
    return f"{status} {phrase}".rstrip()


def _iter_file(path: str) -> Iterator[bytes]:
    with open(path, "rb") as fh:
        while chunk := fh.read(_CHUNK_SIZE):
            yield chunk


def to_wsgi(app: App, fallback: WSGIApp | None = None) -> WSGIApp:
    """Wrap *app* as a WSGI application."""

    def wsgi_app(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        response = app.handle(Request.from_environ(environ))
        if response is None:
            if fallback is not None:
                return fallback(environ, start_response)
            response = Response(
                body="Not Found", status=404, content_type="text/plain; charset=utf-8"
            )

        start_response(status_line(response.status), response.header_items())
        if response.file_path is not None:
            return _iter_file(response.file_path)
        return [response.body_bytes]

    return wsgi_app
