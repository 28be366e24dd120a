"""Collect the infographic blocks of a document into render jobs."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from .config import DEFAULT_LANGUAGE
from .diagnostics import DiagnosticEmitter, ensure_emitter
from .matcher import is_block_container, is_candidate


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class RenderJob:
    """A block payload paired with the node it will replace.

    ``index`` is the position of ``node`` in ``parent`` when the document was
    collected. Substitution never trusts it: earlier replacements in the same
    parent shift positions, so the node is looked up again by identity.
    """

    payload: str
    node: Tag
    parent: Tag
    index: int
    ancestors: tuple[Tag, ...]

    def current_index(self) -> int | None:
        """Return the position of ``node`` in its parent right now."""
        for position, child in enumerate(self.parent.contents):
            if child is self.node:
                return position
        return None


def is_whitespace_text(node: PageElement) -> bool:
    """Return True for plain text nodes holding only whitespace."""
    if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
        return False
    return not str(node).strip()


def is_only_meaningful_child(node: Tag, container: Tag) -> bool:
    """Return True when every other child of ``container`` is blank text."""
    for child in container.contents:
        if child is node:
            continue
        if not is_whitespace_text(child):
            return False
    return True


def extract_payload(node: Tag) -> str:
    """Return the text content of ``node`` with whitespace preserved."""
    return node.get_text(strip=False)


def _resolve_job(
    node: Tag, ancestors: tuple[Tag, ...], language: str
) -> RenderJob | None:
    """Return the job for ``node`` when it denotes a block to render."""
    if not is_candidate(node, language):
        return None

    parent = node.parent
    if parent is None:
        return None

    if is_block_container(parent):
        if not is_only_meaningful_child(node, parent):
            logger.debug("Skipping <%s> sharing its <pre> with other content", node.name)
            return None
        unit = parent
        inclusive_ancestors = ancestors
    else:
        unit = node
        inclusive_ancestors = (*ancestors, node)

    payload = extract_payload(node)
    if not payload.strip():
        logger.debug("Skipping empty <%s> block", node.name)
        return None

    container = unit.parent
    if container is None:
        return None

    job = RenderJob(
        payload=payload,
        node=unit,
        parent=container,
        index=container.index(unit),
        ancestors=inclusive_ancestors,
    )
    return job


def collect(
    tree: Tag,
    language: str = DEFAULT_LANGUAGE,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> list[RenderJob]:
    """Walk ``tree`` once, in document order, and return its render jobs.

    The tree is not modified. Subtrees of collected blocks are not visited
    since they are replaced as a whole.
    """
    jobs: list[RenderJob] = []
    stack: list[tuple[Tag, tuple[Tag, ...]]] = [(tree, ())]

    while stack:
        node, ancestors = stack.pop()
        job = _resolve_job(node, ancestors, language)
        if job is not None:
            jobs.append(job)
            continue

        lineage = (*ancestors, node)
        children = [child for child in node.contents if isinstance(child, Tag)]
        stack.extend((child, lineage) for child in reversed(children))

    ensure_emitter(emitter).event("infographic_collected", {"count": len(jobs)})
    return jobs


__all__ = [
    "RenderJob",
    "collect",
    "extract_payload",
    "is_only_meaningful_child",
    "is_whitespace_text",
]
