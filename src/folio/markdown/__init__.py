"""Markdown rendering for page sources.

Usage::

    from folio.markdown import markdown_plugin

    app.add_plugin(markdown_plugin())

Requires patitas::

    pip install folio[markdown]
"""

from folio.markdown.errors import MarkdownError, MarkdownNotInstalledError
from folio.markdown.plugin import markdown_plugin
from folio.markdown.renderer import MarkdownRenderer, split_frontmatter

__all__ = [
    "MarkdownError",
    "MarkdownNotInstalledError",
    "MarkdownRenderer",
    "markdown_plugin",
    "split_frontmatter",
]
