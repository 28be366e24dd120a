"""Markdown conversion producing HTML ready for the infographic pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from threading import Lock
from typing import Any

import markdown
from pymdownx.superfences import fence_code_format
import yaml

from infosmith.core.config import DEFAULT_LANGUAGE


DEFAULT_MARKDOWN_EXTENSIONS = [
    "pymdownx.superfences",
    "attr_list",
    "tables",
]


class MarkdownConversionError(Exception):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(slots=True)
class MarkdownDocument:
    """Result of converting Markdown into HTML."""

    html: str
    front_matter: dict[str, Any]


class _MarkdownCacheEntry:
    __slots__ = ("lock", "processor")

    def __init__(self, processor: markdown.Markdown) -> None:
        self.processor = processor
        self.lock = Lock()


_MARKDOWN_CACHE: dict[tuple[tuple[str, ...], str], _MarkdownCacheEntry] = {}
_MARKDOWN_CACHE_GUARD = Lock()


def extension_configs(language: str = DEFAULT_LANGUAGE) -> dict[str, dict[str, Any]]:
    """Return extension settings turning ``language`` fences into ``<pre class>`` blocks."""
    return {
        "pymdownx.superfences": {
            "custom_fences": [
                {
                    "name": language,
                    "class": language,
                    "format": fence_code_format,
                }
            ]
        }
    }


def render_markdown(
    source: str,
    extensions: Sequence[str] | None = None,
    *,
    language: str = DEFAULT_LANGUAGE,
) -> MarkdownDocument:
    """Convert Markdown source into HTML while collecting front matter.

    With the default extensions an ``infographic`` fenced block becomes
    ``<pre class="infographic"><code>...</code></pre>``.
    """
    metadata, body = split_front_matter(source)
    active = tuple(extensions if extensions is not None else DEFAULT_MARKDOWN_EXTENSIONS)
    entry = _resolve_markdown_entry(active, language)

    try:
        with entry.lock:
            entry.processor.reset()
            html = entry.processor.convert(body)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc

    return MarkdownDocument(html=html, front_matter=metadata)


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from Markdown content, returning metadata and body."""
    candidate = source.lstrip("\ufeff")
    lines = candidate.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, source

    front_matter_lines: list[str] = []
    closing_index: int | None = None
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() in {"---", "..."}:
            closing_index = idx
            break
        front_matter_lines.append(line)

    if closing_index is None:
        return {}, source

    try:
        metadata = yaml.safe_load("\n".join(front_matter_lines)) or {}
    except yaml.YAMLError:
        return {}, source

    if not isinstance(metadata, dict):
        metadata = {}

    body = "\n".join(lines[closing_index + 1 :])
    if source.endswith("\n"):
        body += "\n"
    return metadata, body


def _resolve_markdown_entry(
    extensions_key: tuple[str, ...], language: str
) -> _MarkdownCacheEntry:
    cache_key = (extensions_key, language)
    entry = _MARKDOWN_CACHE.get(cache_key)
    if entry is not None:
        return entry
    with _MARKDOWN_CACHE_GUARD:
        entry = _MARKDOWN_CACHE.get(cache_key)
        if entry is None:
            configs = {
                name: settings
                for name, settings in extension_configs(language).items()
                if name in extensions_key
            }
            try:
                processor = markdown.Markdown(
                    extensions=list(extensions_key), extension_configs=configs
                )
            except Exception as exc:  # pragma: no cover - library-controlled
                raise MarkdownConversionError(
                    f"Failed to initialize Markdown processor: {exc}"
                ) from exc
            entry = _MarkdownCacheEntry(processor)
            _MARKDOWN_CACHE[cache_key] = entry
    return entry


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "MarkdownDocument",
    "extension_configs",
    "render_markdown",
    "split_front_matter",
]
