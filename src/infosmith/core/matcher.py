"""Detection of the elements that mark an infographic block."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from bs4.element import PageElement, Tag

from .config import DEFAULT_LANGUAGE


CODE_TAG = "code"
CONTAINER_TAG = "pre"
LANGUAGE_ATTRIBUTES = ("data-language", "data-lang")


def coerce_attribute(value: Any) -> str | None:
    """Normalise a BeautifulSoup attribute value to a string when possible."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return None


def gather_classes(value: Any) -> list[str]:
    """Return a list of classes extracted from a BeautifulSoup attribute."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [item for item in value if isinstance(item, str)]
    return []


def matches_marker(classes: Iterable[str], language: str = DEFAULT_LANGUAGE) -> bool:
    """Return True when a class list carries the marker for ``language``.

    ``language-<marker>`` may be followed by a ``-`` suffix added by syntax
    highlighters; the bare marker must match exactly.
    """
    prefixed = f"language-{language}"
    for cls in classes:
        if cls in (language, prefixed):
            return True
        if cls.startswith(f"{prefixed}-"):
            return True
    return False


def is_block_container(node: PageElement | None) -> bool:
    return isinstance(node, Tag) and node.name == CONTAINER_TAG


def is_candidate(node: PageElement | None, language: str = DEFAULT_LANGUAGE) -> bool:
    """Return True when ``node`` is a ``<code>`` or ``<pre>`` tagged for ``language``."""
    if not isinstance(node, Tag) or node.name not in (CODE_TAG, CONTAINER_TAG):
        return False

    if matches_marker(gather_classes(node.get("class")), language):
        return True

    for attribute in LANGUAGE_ATTRIBUTES:
        value = coerce_attribute(node.get(attribute))
        if value is not None and value.strip() == language:
            return True
    return False


__all__ = [
    "CODE_TAG",
    "CONTAINER_TAG",
    "LANGUAGE_ATTRIBUTES",
    "coerce_attribute",
    "gather_classes",
    "is_block_container",
    "is_candidate",
    "matches_marker",
]
