"""Markdown layer error hierarchy."""

from folio.errors import FolioError


class MarkdownError(FolioError):
    """Base for all folio.markdown errors."""


class MarkdownNotInstalledError(MarkdownError):
    """Raised when patitas is not installed."""
