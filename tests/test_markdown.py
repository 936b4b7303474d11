"""Tests for folio.markdown — front matter and the Markdown render plugin."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from conftest import make_request

from folio import App, PagesConfig, Plugin, Route
from folio.context import build_context
from folio.http.response import ResponseWriter
from folio.markdown import markdown_plugin, split_frontmatter
from folio.registry import Registry
from folio.routing.resolver import RouteTable


def _fake_render(source: str) -> str:
    return f"<md>{source.strip()}</md>"


class TestSplitFrontmatter:
    def test_no_frontmatter(self) -> None:
        assert split_frontmatter("# Title\n") == ({}, "# Title\n")

    def test_fields_and_body(self) -> None:
        source = '---\ntitle: "Hello"\nauthor: ada\n---\n# Body\n'
        fields, body = split_frontmatter(source)
        assert fields == {"title": "Hello", "author": "ada"}
        assert body == "# Body\n"

    def test_comments_and_bare_lines_skipped(self) -> None:
        fields, _ = split_frontmatter("---\n# note\nflag\nlayout: wide\n---\n")
        assert fields == {"layout": "wide"}

    def test_value_with_colon(self) -> None:
        fields, _ = split_frontmatter("---\nurl: https://example.com\n---\nx")
        assert fields == {"url": "https://example.com"}

    def test_unterminated_block_is_body(self) -> None:
        source = "---\ntitle: x\n# no closing fence"
        assert split_frontmatter(source) == ({}, source)


class TestMarkdownPlugin:
    def _context(self, route: Route) -> Any:
        return build_context(
            request=make_request(),
            response=ResponseWriter(),
            route=route,
            params={},
            routes=RouteTable([route]),
            registry=Registry(),
            config=PagesConfig(),
            globals_={},
        )

    def test_markdown_source_rendered_and_meta_recorded(self) -> None:
        route = Route.from_pattern("post", "/pages/post.md")
        ctx = self._context(route)
        plugin = markdown_plugin(_fake_render)
        html = plugin.on_render("---\ntitle: Hi\n---\n# Hello", ctx, route, "/pages/post.md", [plugin])
        assert html == "<md># Hello</md>"
        assert ctx.meta("title") == "Hi"

    def test_other_sources_untouched(self) -> None:
        route = Route.from_pattern("post", "/pages/post.html")
        plugin = markdown_plugin(_fake_render)
        assert plugin.on_render("<p>x</p>", self._context(route), route, "/pages/post.html", [plugin]) is None

    def test_custom_extensions(self) -> None:
        route = Route.from_pattern("notes", "/pages/notes.markdown")
        plugin = markdown_plugin(_fake_render, extensions=(".markdown",))
        result = plugin.on_render("text", self._context(route), route, "/pages/notes.markdown", [plugin])
        assert result == "<md>text</md>"


class TestMarkdownInPipeline:
    def test_layout_receives_converted_markdown(
        self, pages: Path, plain_app: Callable[..., App]
    ) -> None:
        page = str(pages / "post.md")
        layout = str(pages / "_layout.html")
        app = plain_app(
            [Route.from_pattern("post", page, layouts=[layout])],
            {page: "---\ntitle: Hi\n---\n*hello*", layout: "<main>{slot}</main>"},
            plugins=[markdown_plugin(_fake_render)],
        )
        response = app.handle(make_request("GET", "/post"))
        assert response is not None
        assert response.text == "<main><md>*hello*</md></main>"

    def test_app_installs_markdown_after_templates(self, pages: Path) -> None:
        app = App(PagesConfig(pages_root=pages), plugins=[Plugin("extra")], markdown=True)
        assert [plugin.name for plugin in app.plugins] == ["kida", "markdown", "extra"]
