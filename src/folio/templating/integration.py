"""Kida environment setup and the template render plugin.

The environment is created once when the app freezes. The render plugin
turns each route source and layout into text by rendering it as a kida
template against the request context.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kida import Environment, FileSystemLoader
from kida.template import Markup

from folio.config import PagesConfig
from folio.errors import ConfigurationError
from folio.plugins import Plugin

if TYPE_CHECKING:
    from folio.context import RequestContext
    from folio.routing.route import Route


def create_environment(
    config: PagesConfig,
    filters: dict[str, Callable[..., Any]] | None = None,
    globals_: dict[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment rooted at the pages directory.

    Called once at freeze time. The returned environment is shared by
    every request.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.root)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    if filters:
        env.update_filters(filters)

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env


def template_name(source_path: str | Path, root: Path) -> str:
    """Template name for *source_path*, relative to the pages root."""
    try:
        return Path(source_path).resolve().relative_to(root).as_posix()
    except ValueError:
        msg = f"Template {source_path!s} is outside the pages root {root!s}"
        raise ConfigurationError(msg) from None


def template_context(ctx: RequestContext) -> dict[str, Any]:
    """The template variables for *ctx*.

    Slot content is already-rendered HTML, so it is marked safe.
    """
    variables = ctx.as_dict()
    variables["slot"] = Markup(ctx.slot)
    variables["slots"] = {name: Markup(text) for name, text in ctx.slots.items()}
    return variables


def kida_plugin(env: Environment, root: Path) -> Plugin:
    """A render plugin that renders each source file as a kida template.

    Ignores the incoming content: the file itself is the template, and
    layouts read the previous stage through ``slot`` / ``slots``.
    """

    def on_render(
        content: str,
        ctx: RequestContext,
        route: Route,
        source_path: str,
        plugins: Sequence[Plugin],
    ) -> str:
        template = env.get_template(template_name(source_path, root))
        return template.render(template_context(ctx))

    return Plugin("kida", on_render=on_render)
