"""High level helpers rendering infographic blocks in HTML and Markdown."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from bs4.element import Tag

from infosmith.adapters.html import parse_html, serialize
from infosmith.adapters.markdown import render_markdown
from infosmith.adapters.renderers import resolve_renderer
from infosmith.core.config import InfographicConfig, resolve_config, with_document_options
from infosmith.core.context import ProcessingContext
from infosmith.core.pipeline import run
from infosmith.core.substitution import Renderer


MARKDOWN_SUFFIXES = (".md", ".markdown", ".mdown")

RendererSpec = Renderer | Sequence[str] | str | None
OptionsSpec = InfographicConfig | Mapping[str, Any] | None


async def render_tree(
    tree: Tag,
    *,
    renderer: RendererSpec = None,
    config: OptionsSpec = None,
    context: ProcessingContext | None = None,
) -> None:
    """Render the infographic blocks of an already parsed tree in place."""
    await run(tree, resolve_renderer(renderer), config, context=context)


def render_html(
    html: str,
    *,
    renderer: RendererSpec = None,
    config: OptionsSpec = None,
    context: ProcessingContext | None = None,
    **options: Any,
) -> str:
    """Return ``html`` with its infographic blocks replaced by SVG.

    Keyword ``options`` override fields of ``config``. This helper drives its
    own event loop; from async code, parse the document and await
    :func:`render_tree` instead.
    """
    settings = resolve_config(config, **options)
    context = context or ProcessingContext()
    tree = parse_html(html, settings.parser, emitter=context.emitter)
    asyncio.run(run(tree, resolve_renderer(renderer), settings, context=context))
    return serialize(tree)


def render_markdown_document(
    source: str,
    *,
    renderer: RendererSpec = None,
    config: OptionsSpec = None,
    context: ProcessingContext | None = None,
    **options: Any,
) -> str:
    """Convert Markdown to HTML, then render its infographic blocks.

    Front matter is stored on ``context.metadata``; its ``infographic`` table
    supplies defaults for the document's blocks.
    """
    settings = resolve_config(config, **options)
    document = render_markdown(source, language=settings.language)
    context = context or ProcessingContext()
    context.metadata.update(document.front_matter)
    settings = with_document_options(settings, document.front_matter)
    return render_html(document.html, renderer=renderer, config=settings, context=context)


def render_path(
    path: Path | str,
    *,
    markdown: bool | None = None,
    renderer: RendererSpec = None,
    config: OptionsSpec = None,
    context: ProcessingContext | None = None,
    **options: Any,
) -> str:
    """Render a Markdown or HTML file, guessing the format from its suffix."""
    source_path = Path(path)
    source = source_path.read_text(encoding="utf-8")
    if markdown is None:
        markdown = source_path.suffix.lower() in MARKDOWN_SUFFIXES
    context = context or ProcessingContext(path=source_path)
    handler = render_markdown_document if markdown else render_html
    return handler(source, renderer=renderer, config=config, context=context, **options)


__all__ = [
    "MARKDOWN_SUFFIXES",
    "render_html",
    "render_markdown_document",
    "render_path",
    "render_tree",
]
