"""Plugin capability contract.

A plugin is a record of four optional hooks. Each hook is either a
callable or ``None``; the pipeline checks presence with ``is not None``
and never inspects the plugin's shape beyond that.

Hook signatures::

    on_request(scope: RequestScope) -> None
    on_extend_context_api(ctx: RequestContext, route: Route) -> None
    on_render(content, ctx, route, source_path, plugins) -> str | None
    on_response(content, ctx, route) -> bool

Usage::

    def add_powered_by(scope):
        scope.response.header("X-Powered-By", "folio")

    powered_by = Plugin("powered-by", on_request=add_powered_by)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.context import RequestContext
    from folio.http.request import Request
    from folio.http.response import ResponseWriter
    from folio.routing.route import Route


@dataclass(frozen=True, slots=True)
class RequestScope:
    """What ``on_request`` sees: the facade pair, before routing."""

    request: Request
    response: ResponseWriter


type OnRequest = Callable[[RequestScope], object]
type OnExtendContextApi = Callable[[RequestContext, Route], object]
type OnRender = Callable[[str, RequestContext, Route, str, Sequence[Plugin]], str | None]
type OnResponse = Callable[[str, RequestContext, Route], bool]


@dataclass(frozen=True, slots=True)
class Plugin:
    """A named bundle of optional pipeline hooks. Immutable once built."""

    name: str
    on_request: OnRequest | None = None
    on_extend_context_api: OnExtendContextApi | None = None
    on_render: OnRender | None = None
    on_response: OnResponse | None = None

    def __repr__(self) -> str:
        hooks = [
            hook
            for hook in ("on_request", "on_extend_context_api", "on_render", "on_response")
            if getattr(self, hook) is not None
        ]
        return f"Plugin({self.name!r}, hooks={hooks})"
