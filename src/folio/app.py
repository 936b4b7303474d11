"""Folio application state.

Mutable during setup (routes, plugins, registry entries, globals).
Frozen on the first request; after that everything the request handler
reads is immutable and shared across requests without locking.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from kida import Environment

from folio._internal.wsgi import WSGIApp, to_wsgi
from folio.config import PagesConfig
from folio.errors import ConfigurationError
from folio.http.request import Request
from folio.http.response import Response
from folio.markdown.plugin import markdown_plugin
from folio.plugins import Plugin
from folio.registry import Registry
from folio.routing.resolver import RouteTable
from folio.routing.route import Route
from folio.server.handler import handle_request
from folio.templating.globals import BUILTIN_GLOBALS
from folio.templating.integration import create_environment, kida_plugin


class App:
    """The folio application.

    Mutable during setup. Frozen on the first ``handle()`` call.

    Usage::

        app = App(PagesConfig(pages_root="pages"), routes=table)

        @app.register("blog/{slug}/+load")
        def load_post(ctx):
            return {"post": posts[ctx.params["slug"]]}

        response = app.handle(Request("GET", "/blog/hello"))

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the app, even if
        several host threads send their first request at once.
    """

    __slots__ = (
        "_custom_kida_env",
        "_filters",
        "_freeze_lock",
        "_frozen",
        "_globals",
        "_kida_env",
        "_markdown",
        "_pending_plugins",
        "_pending_routes",
        "_plugins",
        "_render_templates",
        "_route_table",
        "config",
        "registry",
    )

    def __init__(
        self,
        config: PagesConfig | None = None,
        *,
        routes: Iterable[Route] = (),
        plugins: Iterable[Plugin] = (),
        registry: Registry | None = None,
        kida_env: Environment | None = None,
        render_templates: bool = True,
        markdown: bool = False,
    ) -> None:
        self.config: PagesConfig = config or PagesConfig()
        self.registry: Registry = registry or Registry()
        self._pending_routes: list[Route] = list(routes)
        self._pending_plugins: list[Plugin] = list(plugins)
        self._globals: Mapping[str, Any] = {}
        self._filters: dict[str, Callable[..., Any]] = {}
        self._render_templates = render_templates
        self._markdown = markdown
        self._custom_kida_env: Environment | None = kida_env
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._route_table: RouteTable | None = None
        self._plugins: tuple[Plugin, ...] = ()
        self._kida_env: Environment | None = None

    # -- Setup --

    def add_route(self, route: Route) -> None:
        """Append a route to the table."""
        self._check_not_frozen()
        self._pending_routes.append(route)

    def add_plugin(self, plugin: Plugin) -> None:
        """Append a plugin. Hooks run in registration order."""
        self._check_not_frozen()
        self._pending_plugins.append(plugin)

    def add_global(self, name: str, value: Any) -> None:
        """Add a capability to every request context and template."""
        self._check_not_frozen()
        self._globals = {**self._globals, name: value}

    def template_filter(self, name: str | None = None) -> Callable[[Callable[..., Any]], Any]:
        """Register a kida template filter via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._filters[name or func.__name__] = func
            return func

        return decorator

    def register(self, key: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a middleware, loader, or module under *key*."""
        self._check_not_frozen()
        return self.registry.register(key)

    # -- Runtime --

    @property
    def routes(self) -> RouteTable:
        self._ensure_frozen()
        assert self._route_table is not None
        return self._route_table

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        self._ensure_frozen()
        return self._plugins

    def handle(self, request: Request) -> Response | None:
        """Run one request through the pipeline.

        Returns ``None`` when no route matches.
        """
        self._ensure_frozen()
        assert self._route_table is not None
        return handle_request(
            request,
            routes=self._route_table,
            plugins=self._plugins,
            registry=self.registry,
            config=self.config,
            globals_=self._globals,
        )

    def wsgi(self, fallback: WSGIApp | None = None) -> WSGIApp:
        """Return a WSGI application serving this app."""
        return to_wsgi(self, fallback)

    # -- Freeze --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        logging.getLogger("folio").setLevel(self.config.log_level.upper())

        self._route_table = RouteTable(self._pending_routes)
        self.registry.freeze()
        self._globals = MappingProxyType({**BUILTIN_GLOBALS, **self._globals})

        plugins = list(self._pending_plugins)
        if self._render_templates:
            env = self._custom_kida_env or create_environment(
                self.config, self._filters, dict(self._globals)
            )
            self._kida_env = env
            plugins.insert(0, kida_plugin(env, self.config.root))
        if self._markdown:
            # Converts the template output, so it sits right after the kida plugin
            plugins.insert(
                1 if self._render_templates else 0,
                markdown_plugin(extensions=self.config.markdown_extensions),
            )
        self._plugins = tuple(plugins)

        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started handling requests. "
                "Register routes, plugins, and globals before the first request."
            )
            raise ConfigurationError(msg)
