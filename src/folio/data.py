"""Data accumulation across middlewares and loaders.

Each middleware, then the ``load`` loader, then the loader for the
request method returns a partial mapping. The partials are deep-merged
into one accumulator that ends up as ``ctx.data``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from folio.registry import Registry

if TYPE_CHECKING:
    from folio.context import RequestContext
    from folio.routing.route import Route

logger = logging.getLogger("folio.pipeline")

# Generic loader key, run before the method-specific one
GENERIC_LOADER = "load"


def deep_merge(base: Mapping[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *update* into a copy of *base*.

    Nested mappings merge recursively. Any other conflict — scalars,
    lists, a mapping meeting a non-mapping — goes to *update*.
    Neither argument is modified.
    """
    merged: dict[str, Any] = dict(base)
    for key, value in update.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge({}, value)
        else:
            merged[key] = value
    return merged


def loader_keys(method: str) -> tuple[str, ...]:
    """Loader lookup order for a request method: generic, then the method."""
    method_key = method.lower()
    if method_key == GENERIC_LOADER:
        return (GENERIC_LOADER,)
    return (GENERIC_LOADER, method_key)


def _apply(
    func: Any,
    ctx: RequestContext,
    data: dict[str, Any],
    ref: str,
) -> dict[str, Any]:
    ctx.data = MappingProxyType(data)
    result = func(ctx)
    if result is None:
        return data
    if not isinstance(result, Mapping):
        msg = f"{ref!r} returned {type(result).__name__}, expected a mapping or None"
        raise TypeError(msg)
    return deep_merge(data, result)


def accumulate(ctx: RequestContext, route: Route, method: str, registry: Registry) -> dict[str, Any]:
    """Run the route's middlewares and loaders, returning the merged data.

    Each callable sees ``ctx.data`` as a read-only view of what has been
    accumulated so far. Exceptions propagate; there is no partial result.
    Stops early if a callable commits the response (e.g. a redirect).
    """
    data: dict[str, Any] = {}
    for ref in route.middlewares:
        logger.debug("Executing middleware %s", ref)
        data = _apply(registry.get(ref), ctx, data, ref)
        if ctx.response.committed:
            return data

    for key in loader_keys(method):
        ref = route.loaders.get(key)
        if ref is None:
            continue
        logger.debug("Executing loader %s", ref)
        data = _apply(registry.get(ref), ctx, data, ref)
        if ctx.response.committed:
            return data

    return data
