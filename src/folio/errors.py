"""Folio exception hierarchy.

Shared across the resolver, pipeline, accumulator, and request handler so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class FolioError(Exception):
    """Base for all folio-specific errors."""


class ConfigurationError(FolioError):
    """Raised when setup-time state is invalid.

    Bad route patterns, registering into a frozen registry, or modifying
    an app that has started handling requests.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(FolioError):
    """An error that maps directly to an HTTP status code.

    Raised by loaders, middlewares, or plugins. The request handler
    turns it into a response carrying ``detail`` as the body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return self.detail
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the client sent something the page cannot handle."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class PipelineError(FolioError):
    """A server-side failure inside the request pipeline."""


class UnhandledResponse(PipelineError):
    """No ``on_response`` hook claimed the response."""

    def __init__(self, detail: str = "No plugin handled the response") -> None:
        super().__init__(detail)


class RegistryError(PipelineError, KeyError):
    """A middleware, loader, or module key is not registered."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{key!r} is not defined in the registry")

    def __str__(self) -> str:
        return self.args[0]


class ContextFrozenError(FolioError):
    """Raised when extending a request context after it was frozen."""
