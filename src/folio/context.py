"""Per-request execution context.

The context is a layered merge of read-only maps plus a few mutable
fields. Lookups walk the layers top-down:

1. core — ``request``, ``response``, ``params``, ``route``, helpers
2. extensions — fields added by ``on_extend_context_api`` hooks
3. globals — the app-wide capability set

``data``, ``slot`` and ``slots`` live outside the layers and are the
only things the pipeline mutates after the context is frozen.

Usage in a loader::

    def load(ctx):
        post = ctx.find_post(ctx.params["slug"])
        ctx.meta("title", post.title)
        return {"post": post}
"""

from __future__ import annotations

import posixpath
import time
from collections import ChainMap
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from folio.errors import ConfigurationError, ContextFrozenError
from folio.registry import Registry, normalize_key
from folio.routing.resolver import fingerprinted, resolve_route

if TYPE_CHECKING:
    from folio.config import PagesConfig
    from folio.http.request import Request
    from folio.http.response import ResponseWriter
    from folio.routing.route import ParamValue, Route

# Query key carrying the flash message on redirects
FLASH_QUERY_KEY = "__flash"

RESOLVE_MODES = frozenset({"require", "raw", "script", "style"})


class RequestContext:
    """Everything a loader, plugin, or template sees for one request.

    Owned by a single request and discarded once the response is emitted.
    """

    __slots__ = ("_core", "_extensions", "_frozen", "_layers", "data", "slot", "slots")

    def __init__(self, core: Mapping[str, Any], globals_: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_core", MappingProxyType(dict(core)))
        object.__setattr__(self, "_extensions", {})
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(
            self,
            "_layers",
            ChainMap(self._core, self._extensions, MappingProxyType(dict(globals_))),
        )
        object.__setattr__(self, "data", MappingProxyType({}))
        object.__setattr__(self, "slot", "")
        object.__setattr__(self, "slots", {})

    def __getattr__(self, name: str) -> Any:
        try:
            return self._layers[name]
        except KeyError:
            msg = f"Request context has no field {name!r}"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in ("data", "slot", "slots"):
            msg = f"Cannot set {name!r} on the request context; use extend() in a plugin"
            raise AttributeError(msg)
        object.__setattr__(self, name, value)

    def __getitem__(self, name: str) -> Any:
        if name in ("data", "slot", "slots"):
            return getattr(self, name)
        return self._layers[name]

    def __contains__(self, name: object) -> bool:
        return name in ("data", "slot", "slots") or name in self._layers

    # -- Extension --

    def extend(self, **fields: Any) -> None:
        """Attach fields to the context. Only allowed before ``freeze()``."""
        if self._frozen:
            msg = f"Cannot extend a frozen request context with {sorted(fields)}"
            raise ContextFrozenError(msg)
        shadowed = sorted(set(fields) & (set(self._core) | {"data", "slot", "slots"}))
        if shadowed:
            msg = f"Context extensions may not replace built-in fields: {shadowed}"
            raise ConfigurationError(msg)
        self._extensions.update(fields)

    def freeze(self) -> None:
        """Stop accepting extensions."""
        object.__setattr__(self, "_frozen", True)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Views --

    def as_dict(self) -> dict[str, Any]:
        """Flatten every layer plus the mutable fields into one dict."""
        merged = dict(self._layers)
        merged.update(data=self.data, slot=self.slot, slots=self.slots)
        return merged

    def __repr__(self) -> str:
        return f"<RequestContext {sorted(self.as_dict())!r}>"


def make_meta() -> Callable[..., Any]:
    """Build a per-request metadata accessor.

    ``meta(key)`` reads, ``meta(key, value)`` writes and returns *value*.
    """
    store: dict[str, Any] = {}

    def meta(key: str, value: Any = None) -> Any:
        if value is not None:
            store[key] = value
        return store.get(key)

    return meta


def make_resolve(route: Route, registry: Registry, root: Path) -> Callable[..., Any]:
    """Build the ``resolve`` helper for *route*.

    Paths are relative to the route's directory unless they start with
    ``/``, in which case they are relative to the pages root.

    Modes:
        ``require`` — the value registered under the resolved key.
        ``raw`` — the file's text.
        ``script`` / ``style`` — the file's text wrapped in that tag.
    """

    def resolve(path: str, mode: str = "require") -> Any:
        if mode not in RESOLVE_MODES:
            msg = f"Unknown resolve mode {mode!r}; expected one of {sorted(RESOLVE_MODES)}"
            raise ValueError(msg)
        base = "" if path.startswith("/") else route.directory
        key = normalize_key(posixpath.join(base, path.lstrip("/")))
        if mode == "require":
            return registry.get(key)
        text = (root / key).read_text(encoding="utf-8")
        if mode == "script":
            return f"<script>{text}</script>"
        if mode == "style":
            return f"<style>{text}</style>"
        return text

    return resolve


def make_asset(route: Route, routes: Any, config: PagesConfig) -> Callable[[str], str]:
    """Build the ``asset`` helper for *route*.

    Relative paths resolve against the route's asset prefix. An asset that
    maps to a fingerprinted route gets the fingerprint in its name; one
    that maps to nothing gets a cache-busting query when the config asks
    for it.
    """

    def asset(path: str) -> str:
        if path.startswith("/"):
            short_path = full_path = path
        else:
            short_path = posixpath.join(route.asset_prefix, path) if route.asset_prefix else path
            full_path = "/" + posixpath.normpath(
                posixpath.join(route.directory, route.asset_prefix, path)
            ).lstrip("/")
        match = resolve_route(full_path, routes)
        if match is None:
            if config.cache_bust_assets:
                return f"{short_path}?_r={int(time.time() * 1000)}"
            return short_path
        return fingerprinted(short_path, match.route.fingerprint)

    return asset


def make_redirect(response: ResponseWriter) -> Callable[..., None]:
    """Build the ``redirect`` helper bound to *response*.

    A non-empty *message* is carried to the target under ``__flash``.
    """

    def redirect(path: str, status: int = 302, message: str = "") -> None:
        location = path
        if message:
            parts = urlsplit(path)
            query = [
                (k, v)
                for k, v in parse_qsl(parts.query, keep_blank_values=True)
                if k != FLASH_QUERY_KEY
            ]
            query.append((FLASH_QUERY_KEY, message))
            location = urlunsplit(parts._replace(query=urlencode(query)))
        response.redirect(location, status)

    return redirect


def build_context(
    *,
    request: Request,
    response: ResponseWriter,
    route: Route,
    params: Mapping[str, ParamValue],
    routes: Any,
    registry: Registry,
    config: PagesConfig,
    globals_: Mapping[str, Any],
) -> RequestContext:
    """Assemble a fresh context for one matched request."""
    core: dict[str, Any] = {
        "request": request,
        "response": response,
        "route": route,
        "params": MappingProxyType(dict(params)),
        "body": request.body,
        "form_data": request.form_data,
        "auth": request.auth,
        "asset": make_asset(route, routes, config),
        "meta": make_meta(),
        "resolve": make_resolve(route, registry, config.root),
        "redirect": make_redirect(response),
    }
    return RequestContext(core, globals_)
