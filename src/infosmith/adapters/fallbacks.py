"""Ready-made fallback policies for blocks that fail to render."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from infosmith.core.context import ProcessingContext
from infosmith.core.exceptions import ConfigurationError, describe_failure


PLACEHOLDER_CLASS = "infographic-error"


def keep_source(
    node: PageElement, payload: str, error: BaseException, context: ProcessingContext
) -> PageElement:
    """Leave the failed block in place and record a warning."""
    context.message(f"Keeping infographic source: {describe_failure(error)}", cause=error)
    return node


def remove_block(
    node: PageElement, payload: str, error: BaseException, context: ProcessingContext
) -> None:
    """Drop the failed block from the document."""
    context.message(f"Removed infographic block: {describe_failure(error)}", cause=error)
    return None


def placeholder(
    message: str | None = None,
    *,
    include_source: bool = True,
) -> Callable[[PageElement, str, BaseException, ProcessingContext], Tag]:
    """Return a policy replacing failed blocks with an error ``<div>``."""

    def policy(
        node: PageElement, payload: str, error: BaseException, context: ProcessingContext
    ) -> Tag:
        soup = BeautifulSoup("", "html.parser")
        container = soup.new_tag("div", attrs={"class": PLACEHOLDER_CLASS})
        summary = soup.new_tag("p")
        text = message or f"Failed to render infographic: {describe_failure(error)}"
        summary.string = text
        container.append(summary)
        if include_source:
            source = soup.new_tag("pre")
            source.string = payload
            container.append(source)
        context.message(text, cause=error)
        return container

    return policy


FALLBACK_POLICIES: dict[str, Callable[..., Any] | None] = {
    "fail": None,
    "keep": keep_source,
    "remove": remove_block,
    "placeholder": placeholder(),
}


def resolve_fallback(name: str) -> Callable[..., Any] | None:
    """Return the fallback policy registered under ``name``."""
    key = name.strip().lower()
    try:
        return FALLBACK_POLICIES[key]
    except KeyError as exc:
        choices = ", ".join(sorted(FALLBACK_POLICIES))
        raise ConfigurationError(
            f"Unknown fallback policy '{name}' (expected one of: {choices})"
        ) from exc


__all__ = [
    "FALLBACK_POLICIES",
    "PLACEHOLDER_CLASS",
    "keep_source",
    "placeholder",
    "remove_block",
    "resolve_fallback",
]
