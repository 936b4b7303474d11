"""Error classification for page requests.

Every failure in context building, accumulation, rendering, or response
negotiation ends up here. ``HTTPError`` subclasses such as
``BadRequest`` keep their status and message; anything else becomes a
500 diagnostic page with filesystem paths redacted.

The page is built with plain f-strings so that a broken template system
cannot prevent error reporting.
"""

import html
import logging
import traceback
from dataclasses import replace
from pathlib import Path

from folio.config import PagesConfig
from folio.errors import HTTPError, RegistryError
from folio.http.request import Request
from folio.http.response import Response, ResponseWriter

logger = logging.getLogger("folio.server")

MISSING_SYMBOL_HINT = "are you referencing a symbol missing from the registry or resolve()?"


def error_message(exc: BaseException) -> str:
    """The exception text, with a hint when a symbol lookup failed."""
    message = f"{type(exc).__name__}: {exc}"
    if isinstance(exc, (NameError, RegistryError)) or "is not defined" in str(exc):
        return f"{message} - {MISSING_SYMBOL_HINT}"
    return message


def redact_trace(trace: str, config: PagesConfig) -> str:
    """Hide absolute installation paths in *trace*.

    The pages root becomes ``/<basename>``; the hooks directory marker is
    removed outright.
    """
    root = str(config.root)
    trace = trace.replace(root, "/" + Path(root).name)
    if config.hooks_dir:
        hooks = str(Path(config.hooks_dir).resolve())
        trace = trace.replace(hooks, "").replace(str(config.hooks_dir), "")
    return trace


def render_error_page(exc: BaseException, config: PagesConfig) -> str:
    """Render the 500 diagnostic document."""
    trace = "".join(traceback.format_exception(exc))
    body = html.escape(redact_trace(f"{error_message(exc)}\n{trace}", config))
    return (
        "<html><body><h1>Folio Error</h1>"
        f"<pre><code>{body}</code></pre>"
        "</body></html>"
    )


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an ``HTTPError`` to a response carrying its message."""
    logger.debug("%d %s %s - %s", exc.status, request.method, request.path, exc.detail)
    response = Response(body=str(exc), status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, config: PagesConfig) -> Response:
    """Map an unexpected exception to a 500 diagnostic page."""
    logger.exception("500 %s %s", request.method, request.path)
    return Response(body=render_error_page(exc, config), status=500)


def carry_headers(error: Response, writer: ResponseWriter) -> Response:
    """Copy headers and cookies already set on *writer* onto *error*.

    The partial body is dropped, and so is a ``Location`` left by a redirect.
    """
    partial = writer.finish()
    headers = tuple((name, value) for name, value in partial.headers if name.lower() != "location")
    return replace(error, headers=(*headers, *error.headers), cookies=partial.cookies)
