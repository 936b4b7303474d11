"""Route table and resolution."""

from folio.routing.resolver import RouteTable, resolve_route
from folio.routing.route import Route, RouteMatch, Segment, SegmentKind, parse_pattern

__all__ = [
    "Route",
    "RouteMatch",
    "RouteTable",
    "Segment",
    "SegmentKind",
    "parse_pattern",
    "resolve_route",
]
