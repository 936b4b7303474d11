"""Folio — a file-route-driven page request engine.

Resolves a request against a prebuilt route table, runs the route's
middlewares and loaders, renders its source through a chain of layouts,
and emits exactly one response. Plugins hook into four phases:
``on_request``, ``on_extend_context_api``, ``on_render``, ``on_response``.

Basic usage::

    from folio import App, PagesConfig, Request, Route

    app = App(
        PagesConfig(pages_root="pages"),
        routes=[
            Route.from_pattern(
                "blog/{slug}",
                "pages/blog/[slug].html",
                relative_path="blog/[slug].html",
                loaders={"load": "blog/load"},
                layouts=["pages/_layout.html"],
            ),
        ],
    )

    @app.register("blog/load")
    def load(ctx):
        return {"slug": ctx.params["slug"]}

    response = app.handle(Request("GET", "/blog/hello"))
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "BadRequest",
    "ConfigurationError",
    "FolioError",
    "HTTPError",
    "PagesConfig",
    "Plugin",
    "Registry",
    "Request",
    "RequestContext",
    "Response",
    "Route",
    "RouteTable",
    "parse_slots",
    "resolve_route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import folio`` fast and free of the kida import until an
    ``App`` is actually needed.
    """
    if name == "App":
        from folio.app import App

        return App

    if name == "PagesConfig":
        from folio.config import PagesConfig

        return PagesConfig

    if name in ("BadRequest", "ConfigurationError", "FolioError", "HTTPError"):
        from folio import errors

        return getattr(errors, name)

    if name == "Plugin":
        from folio.plugins import Plugin

        return Plugin

    if name == "Registry":
        from folio.registry import Registry

        return Registry

    if name == "Request":
        from folio.http.request import Request

        return Request

    if name == "Response":
        from folio.http.response import Response

        return Response

    if name == "RequestContext":
        from folio.context import RequestContext

        return RequestContext

    if name in ("Route", "RouteTable", "resolve_route"):
        from folio import routing

        return getattr(routing, name)

    if name == "parse_slots":
        from folio.slots import parse_slots

        return parse_slots

    msg = f"module 'folio' has no attribute {name!r}"
    raise AttributeError(msg)
