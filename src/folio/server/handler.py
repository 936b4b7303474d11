"""Request handler — the whole lifecycle of one page request.

Resolve, build the context, accumulate data, render through layouts,
negotiate the response. This function is the only place exceptions from
those stages are caught.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from folio.config import PagesConfig
from folio.context import build_context
from folio.data import accumulate
from folio.errors import HTTPError
from folio.http.request import Request
from folio.http.response import Response, ResponseWriter
from folio.negotiation import BUILTIN_RESPONDERS
from folio.pipeline import render_page, run_extend_context, run_on_request, run_on_response
from folio.plugins import Plugin, RequestScope
from folio.registry import Registry
from folio.routing.resolver import RouteTable
from folio.server.errors import carry_headers, handle_http_error, handle_internal_error

logger = logging.getLogger("folio.server")


def handle_request(
    request: Request,
    *,
    routes: RouteTable,
    plugins: Sequence[Plugin],
    registry: Registry,
    config: PagesConfig,
    globals_: Mapping[str, Any],
) -> Response | None:
    """Process a single request through the full pipeline.

    Returns ``None`` when no route matches, so the host can hand the
    request to its own fallback. Otherwise returns exactly one response.
    """
    logger.debug("Pages request: %s %s", request.method, request.url)
    response = ResponseWriter()

    try:
        run_on_request(plugins, RequestScope(request=request, response=response))
        if response.committed:
            logger.debug("Response committed by on_request (status %s)", response.status)
            return response.finish()

        match = routes.resolve(request.path)
        if match is None:
            logger.debug("No route matched %s, passing on", request.path)
            return None

        route = match.route
        if route.is_static:
            logger.debug("Serving static file %s", route.absolute_path)
            response.file(route.absolute_path)
            return response.finish()

        ctx = build_context(
            request=request,
            response=response,
            route=route,
            params=match.params,
            routes=routes,
            registry=registry,
            config=config,
            globals_=globals_,
        )
        run_extend_context(plugins, ctx, route)

        ctx.data = accumulate(ctx, route, request.method, registry)
        if response.committed:
            logger.debug("Response committed during data loading (status %s)", response.status)
            return response.finish()

        content = render_page(plugins, ctx, route)
        if response.committed:
            logger.debug("Response committed during rendering (status %s)", response.status)
            return response.finish()

        run_on_response([*plugins, *BUILTIN_RESPONDERS], content, ctx, route)
        return response.finish()

    except HTTPError as exc:
        return carry_headers(handle_http_error(exc, request), response)
    except Exception as exc:
        return carry_headers(handle_internal_error(exc, request, config), response)
