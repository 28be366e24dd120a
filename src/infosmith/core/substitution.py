"""Concurrent rendering of collected blocks and their substitution in the tree.

Rendering and mutation are two separate passes. Every job is dispatched to the
renderer at once and failures are captured as data, so one broken block never
prevents its siblings from rendering. Only when every outcome is known does the
engine walk the worklist, in document order, and mutate the tree.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
import inspect
import logging
from typing import Any, Protocol

from bs4.element import NavigableString, PageElement

from infosmith.adapters.html import parse_artifact, raw_artifact

from .collector import RenderJob
from .context import ProcessingContext
from .diagnostics import ensure_emitter
from .exceptions import (
    InfographicRenderError,
    InfosmithError,
    RendererExecutionError,
    describe_failure,
)


logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Callable turning a block payload into markup."""

    def __call__(self, payload: str, options: Mapping[str, Any]) -> Awaitable[str] | str: ...


FallbackPolicy = Callable[[PageElement, str, BaseException, ProcessingContext], Any]


@dataclass(frozen=True, slots=True, eq=False)
class RenderOutcome:
    """Result of rendering one job: markup on success, the error otherwise."""

    job: RenderJob
    markup: str | None = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.markup is not None


async def _render_one(
    job: RenderJob, renderer: Renderer, options: Mapping[str, Any]
) -> RenderOutcome:
    try:
        result = renderer(job.payload, dict(options))
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        logger.debug("Renderer failed for block at index %d: %s", job.index, exc)
        return RenderOutcome(job=job, error=exc)

    if not isinstance(result, str):
        error = RendererExecutionError(
            f"Renderer returned {type(result).__name__} instead of markup"
        )
        return RenderOutcome(job=job, error=error)
    return RenderOutcome(job=job, markup=result)


async def render_all(
    jobs: Sequence[RenderJob],
    renderer: Renderer,
    options: Mapping[str, Any],
    *,
    context: ProcessingContext | None = None,
) -> list[RenderOutcome]:
    """Render every job concurrently and return the outcomes in job order."""
    if not jobs:
        return []

    outcomes = await asyncio.gather(*(_render_one(job, renderer, options) for job in jobs))

    failed = sum(1 for outcome in outcomes if not outcome.succeeded)
    emitter = ensure_emitter(context.emitter if context is not None else None)
    emitter.event(
        "infographic_rendered",
        {"succeeded": len(outcomes) - failed, "failed": failed},
    )
    return list(outcomes)


def _locate(job: RenderJob) -> int:
    position = job.current_index()
    if position is None:
        raise InfosmithError(f"<{job.node.name}> block is no longer attached to its parent")
    return position


def replace_node(job: RenderJob, replacement: PageElement) -> None:
    """Put ``replacement`` where the job's node currently sits."""
    if replacement is job.node:
        return
    position = _locate(job)
    job.parent.contents[position].extract()
    job.parent.insert(position, replacement)


def remove_node(job: RenderJob) -> None:
    """Detach the job's node, closing the gap among its siblings."""
    position = _locate(job)
    job.parent.contents[position].extract()


def artifact_node(markup: str, parser: str, context: ProcessingContext) -> PageElement:
    """Return the node standing for rendered markup."""
    node = parse_artifact(markup, parser, emitter=context.emitter)
    if node is not None:
        return node
    context.message("Rendered infographic could not be parsed; keeping raw markup")
    return raw_artifact(markup)


def _coerce_replacement(value: Any, parser: str, context: ProcessingContext) -> PageElement:
    if isinstance(value, PageElement):
        return value
    if isinstance(value, str):
        node = parse_artifact(value, parser, emitter=context.emitter)
        return node if node is not None else NavigableString(value)
    raise InfosmithError(
        f"Fallback returned {type(value).__name__}; expected a node, markup or None"
    )


def fallback_replacement(
    outcome: RenderOutcome,
    fallback: FallbackPolicy,
    context: ProcessingContext,
    parser: str = "html.parser",
) -> PageElement | None:
    """Ask ``fallback`` what stands for a failed block; ``None`` removes it."""
    job = outcome.job
    error = outcome.error or RendererExecutionError("Renderer produced no markup")
    replacement = fallback(job.node, job.payload, error, context)
    if replacement is None:
        return None
    return _coerce_replacement(replacement, parser, context)


def apply_replacement(job: RenderJob, replacement: PageElement | None) -> str:
    """Mutate the tree for one job and return the action taken."""
    if replacement is None:
        remove_node(job)
        return "remove"
    if replacement is job.node:
        return "keep"
    replace_node(job, replacement)
    return "replace"


def fatal_error(outcome: RenderOutcome, context: ProcessingContext) -> InfographicRenderError:
    """Report a failed outcome on the context and return the fatal error."""
    reason = f"Failed to render infographic: {describe_failure(outcome.error)}"
    return context.fail(reason, ancestors=outcome.job.ancestors, cause=outcome.error)


def substitute(
    outcomes: Sequence[RenderOutcome],
    *,
    fallback: FallbackPolicy | None = None,
    context: ProcessingContext | None = None,
    artifact_parser: str = "xml",
) -> None:
    """Apply outcomes to the tree in worklist order.

    Every replacement is settled before the first node is touched: without a
    fallback policy the first failure aborts the run, and an exception raised
    by a policy propagates with the tree unchanged.
    """
    context = context or ProcessingContext()

    if fallback is None:
        for outcome in outcomes:
            if not outcome.succeeded:
                raise fatal_error(outcome, context) from outcome.error

    plan: list[tuple[RenderOutcome, PageElement | None]] = []
    for outcome in outcomes:
        if outcome.succeeded and outcome.markup is not None:
            plan.append((outcome, artifact_node(outcome.markup, artifact_parser, context)))
        elif fallback is not None:
            plan.append((outcome, fallback_replacement(outcome, fallback, context)))

    for outcome, replacement in plan:
        action = apply_replacement(outcome.job, replacement)
        if not outcome.succeeded:
            context.emitter.event(
                "infographic_fallback",
                {"action": action, "reason": describe_failure(outcome.error)},
            )


async def run_jobs(
    jobs: Sequence[RenderJob],
    renderer: Renderer,
    options: Mapping[str, Any],
    *,
    fallback: FallbackPolicy | None = None,
    context: ProcessingContext | None = None,
    artifact_parser: str = "xml",
) -> None:
    """Render ``jobs`` concurrently, then substitute the results."""
    context = context or ProcessingContext()
    outcomes = await render_all(jobs, renderer, options, context=context)
    substitute(
        outcomes,
        fallback=fallback,
        context=context,
        artifact_parser=artifact_parser,
    )


__all__ = [
    "FallbackPolicy",
    "RenderOutcome",
    "Renderer",
    "apply_replacement",
    "artifact_node",
    "fallback_replacement",
    "fatal_error",
    "remove_node",
    "render_all",
    "replace_node",
    "run_jobs",
    "substitute",
]
