"""Entry point chaining collection, rendering and substitution."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from bs4.element import Tag

from .collector import collect
from .config import InfographicConfig, resolve_config
from .context import ProcessingContext
from .substitution import Renderer, run_jobs


logger = logging.getLogger(__name__)


async def run(
    tree: Tag,
    renderer: Renderer,
    config: InfographicConfig | Mapping[str, Any] | None = None,
    *,
    context: ProcessingContext | None = None,
) -> None:
    """Render every infographic block of ``tree`` in place.

    Raises :class:`~infosmith.core.exceptions.InfographicRenderError` when a
    block fails and no fallback policy is configured; the tree is left
    untouched in that case.
    """
    settings = resolve_config(config)
    context = context or ProcessingContext()

    jobs = collect(tree, settings.language, emitter=context.emitter)
    if not jobs:
        return

    logger.debug("Rendering %d infographic block(s)", len(jobs))
    await run_jobs(
        jobs,
        renderer,
        settings.render_options(),
        fallback=settings.fallback,
        context=context,
        artifact_parser=settings.artifact_parser,
    )


__all__ = ["run"]
