"""Tests for the WSGI adapter."""

import io
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from folio import App, Route
from folio._internal.wsgi import status_line


def _environ(path: str, method: str = "GET", body: bytes = b"", **extra: Any) -> dict[str, Any]:
    environ: dict[str, Any] = {
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "QUERY_STRING": "",
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.input": io.BytesIO(body),
    }
    environ.update(extra)
    return environ


class _StartResponse:
    def __init__(self) -> None:
        self.status = ""
        self.headers: list[tuple[str, str]] = []

    def __call__(self, status: str, headers: list[tuple[str, str]]) -> None:
        self.status = status
        self.headers = headers


def _call(app: Callable[..., Iterable[bytes]], environ: dict[str, Any]) -> tuple[_StartResponse, bytes]:
    start = _StartResponse()
    body = b"".join(app(environ, start))
    return start, body


class TestStatusLine:
    def test_known(self) -> None:
        assert status_line(404) == "404 Not Found"
        assert status_line(302) == "302 Found"

    def test_unknown(self) -> None:
        assert status_line(599) == "599"


class TestWsgi:
    def test_page(self, pages: Path, plain_app: Callable[..., App]) -> None:
        page = str(pages / "index.html")
        app = plain_app([Route.from_pattern("", page)], {page: "<h1>hi</h1>"})
        start, body = _call(app.wsgi(), _environ("/"))
        assert start.status == "200 OK"
        assert ("Content-Type", "text/html; charset=utf-8") in start.headers
        assert body == b"<h1>hi</h1>"

    def test_headers_reach_request(self, pages: Path, plain_app: Callable[..., App]) -> None:
        page = str(pages / "index.html")
        app = plain_app([Route.from_pattern("", page, loaders={"load": "load"})], {page: "{data}"})
        app.registry.add("load", lambda ctx: {"agent": ctx.request.header("User-Agent")})
        _, body = _call(app.wsgi(), _environ("/", HTTP_USER_AGENT="pytest"))
        assert body == b"{'agent': 'pytest'}"

    def test_static_file_streamed(
        self, write_page: Callable[[str, str], str], plain_app: Callable[..., App]
    ) -> None:
        js = write_page("app.js", "console.log(1)")
        app = plain_app([Route.from_pattern("app.js", js, is_static=True)], {})
        start, body = _call(app.wsgi(), _environ("/app.js"))
        assert start.status == "200 OK"
        assert body == b"console.log(1)"

    def test_pass_through_to_fallback(self, plain_app: Callable[..., App]) -> None:
        def fallback(environ: dict[str, Any], start_response: Any) -> list[bytes]:
            start_response("200 OK", [("Content-Type", "text/plain")])
            return [b"fallback"]

        start, body = _call(plain_app([], {}).wsgi(fallback), _environ("/other"))
        assert start.status == "200 OK"
        assert body == b"fallback"

    def test_pass_through_without_fallback(self, plain_app: Callable[..., App]) -> None:
        start, body = _call(plain_app([], {}).wsgi(), _environ("/other"))
        assert start.status == "404 Not Found"
        assert body == b"Not Found"
