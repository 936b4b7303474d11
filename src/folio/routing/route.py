"""Route, Segment, and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from types import MappingProxyType

from folio.errors import ConfigurationError


class SegmentKind(Enum):
    """How a route segment matches a path segment.

    Member order is specificity order: lower rank wins.
    """

    STATIC = 0
    DYNAMIC = 1
    CATCH_ALL = 2


@dataclass(frozen=True, slots=True)
class Segment:
    """One component of a route pattern.

    Static:    ``blog``          (kind=STATIC, value="blog")
    Dynamic:   ``{slug}``        (kind=DYNAMIC, name="slug")
    Catch-all: ``{rest:path}``   (kind=CATCH_ALL, name="rest")
    """

    kind: SegmentKind
    value: str = ""
    name: str | None = None

    @classmethod
    def parse(cls, part: str) -> Segment:
        """Parse a single pattern component."""
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            name, _, converter = inner.partition(":")
            if not name:
                msg = f"Route segment {part!r} has no parameter name."
                raise ConfigurationError(msg)
            if converter == "path":
                return cls(SegmentKind.CATCH_ALL, value=part, name=name)
            if converter:
                msg = f"Unknown converter {converter!r} in route segment {part!r}."
                raise ConfigurationError(msg)
            return cls(SegmentKind.DYNAMIC, value=part, name=name)
        if "{" in part or "}" in part:
            msg = f"Malformed route segment {part!r}. Use {{name}} or {{name:path}}."
            raise ConfigurationError(msg)
        return cls(SegmentKind.STATIC, value=part)


def parse_pattern(pattern: str) -> tuple[Segment, ...]:
    """Parse a route pattern string into segments.

    Examples::

        "/"                 -> ()
        "blog/{slug}"       -> (Segment(STATIC, "blog"), Segment(DYNAMIC, name="slug"))
        "docs/{rest:path}"  -> (Segment(STATIC, "docs"), Segment(CATCH_ALL, name="rest"))
    """
    return tuple(Segment.parse(p) for p in pattern.strip("/").split("/") if p)


def _check_segments(segments: tuple[Segment, ...]) -> None:
    names: set[str] = set()
    for i, seg in enumerate(segments):
        if seg.kind is SegmentKind.CATCH_ALL and i != len(segments) - 1:
            msg = f"Catch-all segment {seg.value!r} must be the last segment."
            raise ConfigurationError(msg)
        if seg.name is not None:
            if seg.name in names:
                msg = f"Duplicate route parameter {seg.name!r}."
                raise ConfigurationError(msg)
            names.add(seg.name)


@dataclass(frozen=True, slots=True)
class Route:
    """A file-backed endpoint. Built once by the bootstrap, never mutated.

    Attributes:
        segments: Pattern segments, matched positionally.
        absolute_path: Source file on disk.
        relative_path: Source file relative to the pages root.
        is_static: Serve the file as-is and bypass the pipeline.
        asset_prefix: Directory relative assets are resolved against.
        fingerprint: Content-derived token for cache-busting, if any.
        middlewares: Registry keys run before loaders, in order.
        loaders: Registry keys by lowercase method name or ``"load"``.
        layouts: Layout sources, innermost first.
    """

    segments: tuple[Segment, ...]
    absolute_path: str
    relative_path: str = ""
    is_static: bool = False
    asset_prefix: str = ""
    fingerprint: str | None = None
    middlewares: tuple[str, ...] = ()
    loaders: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    layouts: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_segments(self.segments)
        # Method keys are stored lowercase so lookup is case-insensitive
        normalized = {key.lower(): ref for key, ref in self.loaders.items()}
        object.__setattr__(self, "loaders", MappingProxyType(normalized))

    @classmethod
    def from_pattern(
        cls,
        pattern: str,
        absolute_path: str,
        *,
        relative_path: str = "",
        is_static: bool = False,
        asset_prefix: str = "",
        fingerprint: str | None = None,
        middlewares: Iterable[str] = (),
        loaders: Mapping[str, str] | None = None,
        layouts: Iterable[str] = (),
    ) -> Route:
        """Build a Route from a pattern like ``"blog/{slug}"``."""
        return cls(
            segments=parse_pattern(pattern),
            absolute_path=absolute_path,
            relative_path=relative_path,
            is_static=is_static,
            asset_prefix=asset_prefix,
            fingerprint=fingerprint,
            middlewares=tuple(middlewares),
            loaders=loaders or {},
            layouts=tuple(layouts),
        )

    @property
    def pattern(self) -> str:
        """The route pattern as a path string."""
        return "/" + "/".join(seg.value for seg in self.segments)

    @property
    def directory(self) -> str:
        """Directory of the source file relative to the pages root."""
        parent = PurePosixPath(self.relative_path).parent
        return "" if str(parent) == "." else str(parent)


type ParamValue = str | list[str]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route resolution."""

    route: Route
    params: dict[str, ParamValue]
