"""Markdown rendering via patitas, plus front-matter handling.

Front matter is a block of ``key: value`` lines fenced by ``---`` at the
very start of the document. The values become page metadata.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from folio.markdown.errors import MarkdownNotInstalledError

if TYPE_CHECKING:
    from patitas import Markdown

_FRONTMATTER_RE = re.compile(r"\A\s*---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def split_frontmatter(source: str) -> tuple[dict[str, str], str]:
    """Split *source* into its front-matter fields and the remaining body.

    Lines without a ``:`` and ``#`` comments are skipped. Surrounding
    quotes on values are removed.
    """
    match = _FRONTMATTER_RE.match(source)
    if match is None:
        return {}, source

    fields: dict[str, str] = {}
    for line in match.group(1).splitlines():
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        fields[key.strip()] = value
    return fields, source[match.end() :]


class MarkdownRenderer:
    """Render Markdown source to HTML via patitas.

    Args:
        plugins: Patitas plugins to enable (default: all).
        highlight: Enable syntax highlighting for fenced code blocks.
    """

    def __init__(
        self,
        *,
        plugins: list[str] | None = None,
        highlight: bool = False,
    ) -> None:
        self._md: Markdown = _get_markdown(plugins=plugins, highlight=highlight)

    def render(self, source: str) -> str:
        """Render Markdown source to an HTML string."""
        if not source:
            return ""
        return self._md(source)


def _get_markdown(
    *,
    plugins: list[str] | None,
    highlight: bool,
) -> Markdown:
    """Create a patitas Markdown instance, raising a clear error if missing."""
    try:
        from patitas import Markdown
    except ImportError:
        msg = (
            "folio.markdown requires 'patitas' for Markdown rendering. "
            "Install with: pip install folio[markdown]"
        )
        raise MarkdownNotInstalledError(msg) from None

    return Markdown(plugins=plugins or ["all"], highlight=highlight)
