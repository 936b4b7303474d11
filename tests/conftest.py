from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from folio.app import App
from folio.config import PagesConfig
from folio.http.headers import Headers
from folio.http.query import QueryParams
from folio.http.request import Request
from folio.plugins import Plugin
from folio.routing.route import Route


def make_request(
    method: str = "GET",
    path: str = "/",
    *,
    query: str = "",
    headers: dict[str, str] | None = None,
    body: bytes = b"",
) -> Request:
    return Request(
        method=method,
        path=path,
        headers=Headers.from_mapping(headers),
        query=QueryParams(query),
        raw_body=body,
    )


def source_plugin(sources: dict[str, str]) -> Plugin:
    """A render plugin that looks up each source path in *sources*.

    Stands in for the template engine: ``{slot}`` in a layout is replaced
    with ``ctx.slot`` and ``{data}`` with ``repr(ctx.data)``.
    """

    def on_render(content: str, ctx: Any, route: Route, source_path: str, plugins: Sequence[Plugin]) -> str:
        text = sources[source_path]
        return text.replace("{slot}", ctx.slot).replace("{data}", repr(dict(ctx.data)))

    return Plugin("sources", on_render=on_render)


@pytest.fixture
def pages(tmp_path: Path) -> Path:
    root = tmp_path / "pages"
    root.mkdir()
    return root


@pytest.fixture
def write_page(pages: Path) -> Callable[[str, str], str]:
    def write(relative: str, text: str) -> str:
        path = pages / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def plain_app(pages: Path) -> Callable[..., App]:
    """Build an App that renders through ``source_plugin`` instead of kida."""

    def build(
        routes: Sequence[Route],
        sources: dict[str, str],
        *,
        plugins: Sequence[Plugin] = (),
        **config: Any,
    ) -> App:
        return App(
            PagesConfig(pages_root=pages, **config),
            routes=routes,
            plugins=[source_plugin(sources), *plugins],
            render_templates=False,
        )

    return build
