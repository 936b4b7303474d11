"""Route resolution with specificity tie-breaking.

Every route in the table is tried positionally. When several match, the
one whose segment kinds rank lowest left to right wins (static beats
dynamic beats catch-all); equal ranks fall back to table order.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import PurePosixPath

from folio.routing.route import ParamValue, Route, RouteMatch, SegmentKind

logger = logging.getLogger("folio.routing")


def split_path(path: str) -> list[str]:
    """Split a URL path into non-empty segments, dropping any query string."""
    path = path.partition("?")[0].partition("#")[0]
    return [p for p in path.split("/") if p]


def fingerprinted(path: str, fingerprint: str | None) -> str:
    """Insert *fingerprint* before the file extension of *path*.

    ``/css/app.css`` with ``"3f2a"`` becomes ``/css/app.3f2a.css``.
    Paths without an extension get the token appended.
    """
    if not fingerprint:
        return path
    pure = PurePosixPath(path)
    if pure.suffix:
        name = f"{pure.stem}.{fingerprint}{pure.suffix}"
    else:
        name = f"{pure.name}.{fingerprint}"
    head = path[: len(path) - len(pure.name)]
    return head + name


def _static_matches(expected: str, part: str, route: Route, is_last: bool) -> bool:
    if expected == part:
        return True
    return is_last and route.fingerprint is not None and part == fingerprinted(
        expected, route.fingerprint
    )


def match_route(route: Route, parts: Sequence[str]) -> dict[str, ParamValue] | None:
    """Match *parts* against a single route. Returns bound params or ``None``."""
    params: dict[str, ParamValue] = {}
    segments = route.segments
    for i, seg in enumerate(segments):
        if seg.kind is SegmentKind.CATCH_ALL:
            params[seg.name or "path"] = list(parts[i:])
            return params
        if i >= len(parts):
            return None
        part = parts[i]
        if seg.kind is SegmentKind.STATIC:
            if not _static_matches(seg.value, part, route, i == len(segments) - 1):
                return None
        else:
            params[seg.name or ""] = part
    if len(parts) != len(segments):
        return None
    return params


def specificity(route: Route) -> tuple[int, ...]:
    """Sort key for a route: one rank per segment, lower is more specific."""
    return tuple(seg.kind.value for seg in route.segments)


def resolve_route(path: str, routes: Iterable[Route]) -> RouteMatch | None:
    """Resolve *path* to the most specific matching route.

    Returns ``None`` when nothing matches — the caller passes the request
    on to whatever handles unmatched paths.
    """
    parts = split_path(path)
    best: tuple[tuple[int, ...], int, Route, dict[str, ParamValue]] | None = None
    for index, route in enumerate(routes):
        params = match_route(route, parts)
        if params is None:
            continue
        key = specificity(route)
        if best is None or (key, index) < (best[0], best[1]):
            best = (key, index, route, params)

    if best is None:
        logger.debug("No route matched %r", path)
        return None

    _, _, route, params = best
    logger.debug("Resolved %r to %s", path, route.pattern)
    return RouteMatch(route=route, params=params)


class RouteTable:
    """Immutable, ordered collection of routes.

    Built once before requests are served and shared by all of them.
    Holds a tuple, so concurrent reads need no locking.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._routes: tuple[Route, ...] = tuple(routes)

    def resolve(self, path: str) -> RouteMatch | None:
        """Resolve *path* against this table."""
        return resolve_route(path, self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]

    def __repr__(self) -> str:
        return f"RouteTable({[r.pattern for r in self._routes]!r})"
