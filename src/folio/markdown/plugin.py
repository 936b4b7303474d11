"""Render plugin that converts Markdown sources to HTML.

Runs after the template plugin: the template output for a ``.md`` source
is split into front matter and body, each front-matter field is stored
with ``ctx.meta``, and the body is rendered to HTML. Other sources pass
through untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from folio.markdown.renderer import MarkdownRenderer, split_frontmatter
from folio.plugins import Plugin

if TYPE_CHECKING:
    from folio.context import RequestContext
    from folio.routing.route import Route


def markdown_plugin(
    render: Callable[[str], str] | None = None,
    *,
    extensions: Sequence[str] = (".md",),
) -> Plugin:
    """Build the Markdown render plugin.

    Args:
        render: Markdown-to-HTML function. Defaults to a patitas renderer.
        extensions: Source suffixes treated as Markdown.
    """
    to_html = render or MarkdownRenderer().render
    suffixes = tuple(extensions)

    def on_render(
        content: str,
        ctx: RequestContext,
        route: Route,
        source_path: str,
        plugins: Sequence[Plugin],
    ) -> str | None:
        if not source_path.endswith(suffixes):
            return None
        fields, body = split_frontmatter(content)
        for key, value in fields.items():
            ctx.meta(key, value)
        return to_html(body)

    return Plugin("markdown", on_render=on_render)
