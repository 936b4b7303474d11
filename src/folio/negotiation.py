"""Built-in response strategies, appended after user plugins.

The JSON responder claims content that parses as a JSON document; the
HTML responder claims everything else.
"""

from __future__ import annotations

import json as json_module
import logging
from typing import TYPE_CHECKING

from folio.plugins import Plugin

if TYPE_CHECKING:
    from folio.context import RequestContext
    from folio.routing.route import Route

logger = logging.getLogger("folio.pipeline")


def _reject_constant(token: str) -> None:
    raise ValueError(f"{token} is not valid JSON")


def respond_json(content: str, ctx: RequestContext, route: Route) -> bool:
    """Emit a 200 JSON response if *content* parses as strict JSON.

    ``NaN`` and ``Infinity`` are not JSON documents and fall through to HTML.
    """
    logger.debug("Attempting to parse as JSON")
    try:
        parsed = json_module.loads(content, parse_constant=_reject_constant)
    except ValueError:
        logger.debug("Not JSON")
        return False
    ctx.response.json(200, parsed)
    return True


def respond_html(content: str, ctx: RequestContext, route: Route) -> bool:
    """Emit a 200 HTML response. Always claims."""
    ctx.response.html(200, content)
    return True


json_responder = Plugin("json", on_response=respond_json)
html_responder = Plugin("html", on_response=respond_html)

BUILTIN_RESPONDERS: tuple[Plugin, ...] = (json_responder, html_responder)
