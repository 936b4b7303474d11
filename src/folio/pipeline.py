"""Plugin hook execution.

Four phases, each with its own composition rule:

- ``on_request``: every plugin, in order, for side effects.
- ``on_extend_context_api``: every plugin, in order, additive.
- ``on_render``: left fold over content; ``None`` means unchanged.
- ``on_response``: first plugin returning truthy claims the response.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from folio.errors import UnhandledResponse
from folio.plugins import Plugin, RequestScope
from folio.slots import parse_slots

if TYPE_CHECKING:
    from folio.context import RequestContext
    from folio.routing.route import Route

logger = logging.getLogger("folio.pipeline")


def run_on_request(plugins: Sequence[Plugin], scope: RequestScope) -> None:
    """Invoke every ``on_request`` hook. Return values are ignored."""
    for plugin in plugins:
        if plugin.on_request is not None:
            plugin.on_request(scope)


def run_extend_context(plugins: Sequence[Plugin], ctx: RequestContext, route: Route) -> None:
    """Let every plugin attach fields, then freeze the context's extensions."""
    for plugin in plugins:
        if plugin.on_extend_context_api is not None:
            plugin.on_extend_context_api(ctx, route)
    ctx.freeze()


def render_fold(
    plugins: Sequence[Plugin],
    content: str,
    ctx: RequestContext,
    route: Route,
    source_path: str,
) -> str:
    """Fold *content* through every ``on_render`` hook for *source_path*."""
    for plugin in plugins:
        if plugin.on_render is None:
            continue
        result = plugin.on_render(content, ctx, route, source_path, plugins)
        if result is not None:
            content = result
    return content


def render_page(plugins: Sequence[Plugin], ctx: RequestContext, route: Route) -> str:
    """Render the route's source, then wrap it in each layout, innermost first.

    Before each layout the current content is split into slots;
    ``ctx.slots`` gets the map and ``ctx.slot`` the default slot (or the
    residual content when there is none).
    """
    logger.debug("Rendering %s", route.absolute_path)
    content = render_fold(plugins, "", ctx, route, route.absolute_path)

    for layout_path in route.layouts:
        parsed = parse_slots(content)
        ctx.slots = parsed.slots
        ctx.slot = parsed.primary
        logger.debug("Rendering layout %s", layout_path)
        content = render_fold(plugins, content, ctx, route, layout_path)

    return content


def run_on_response(
    plugins: Sequence[Plugin],
    content: str,
    ctx: RequestContext,
    route: Route,
) -> Plugin:
    """Offer the response to each plugin until one claims it.

    Returns the claiming plugin. Raises ``UnhandledResponse`` if none does.
    """
    for plugin in plugins:
        if plugin.on_response is not None and plugin.on_response(content, ctx, route):
            logger.debug("Response handled by %s", plugin.name)
            return plugin
    raise UnhandledResponse()
