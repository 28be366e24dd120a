from __future__ import annotations

from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup
import pytest

from infosmith.api import render_html, render_markdown_document, render_path, render_tree
from infosmith.core.config import InfographicConfig
from infosmith.core.context import ProcessingContext
from infosmith.core.exceptions import InfographicRenderError
from infosmith.core.pipeline import run


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


@pytest.mark.asyncio
async def test_document_without_blocks_is_unchanged(fake_renderer: Any) -> None:
    html = '<h1>Hi</h1><pre><code class="language-js">x()</code></pre>'
    tree = _soup(html)

    result = await run(tree, fake_renderer)

    assert result is None
    assert str(tree) == html
    assert fake_renderer.calls == []


@pytest.mark.asyncio
async def test_default_dimensions_are_sent_to_renderer(fake_renderer: Any) -> None:
    tree = _soup('<pre class="infographic">A</pre>')

    await run(tree, fake_renderer)

    assert fake_renderer.calls == [("A", {"width": "100%", "height": "auto"})]


@pytest.mark.asyncio
async def test_renderer_options_are_merged(fake_renderer: Any) -> None:
    tree = _soup('<pre class="infographic">A</pre>')

    await run(
        tree,
        fake_renderer,
        {"width": 640, "infographicOptions": {"theme": "dark", "height": 300}},
    )

    assert fake_renderer.calls == [("A", {"width": 640, "height": 300, "theme": "dark"})]


@pytest.mark.asyncio
async def test_configured_fallback_is_used(make_renderer: Any) -> None:
    renderer = make_renderer({"A": RuntimeError("boom")})
    tree = _soup('<pre class="infographic">A</pre><pre class="infographic">B</pre>')

    await run(tree, renderer, InfographicConfig(fallback=lambda *args: None))

    assert str(tree) == "<svg>B</svg>"


@pytest.mark.asyncio
async def test_failure_without_fallback_raises(make_renderer: Any) -> None:
    renderer = make_renderer({"B": RuntimeError("boom")})
    html = '<pre class="infographic">A</pre><pre class="infographic">B</pre>'
    tree = _soup(html)
    context = ProcessingContext()

    with pytest.raises(InfographicRenderError, match="boom"):
        await run(tree, renderer, context=context)

    assert str(tree) == html
    assert [message.fatal for message in context.messages] == [True]


@pytest.mark.asyncio
async def test_custom_language_marker(fake_renderer: Any) -> None:
    tree = _soup(
        '<pre><code class="language-mermaid">graph</code></pre>'
        '<pre class="infographic">A</pre>'
    )

    await run(tree, fake_renderer, {"language": "mermaid"})

    assert [payload for payload, _ in fake_renderer.calls] == ["graph"]


@pytest.mark.asyncio
async def test_second_run_finds_nothing_left(fake_renderer: Any) -> None:
    tree = _soup('<pre class="infographic">A</pre>')

    await render_tree(tree, renderer=fake_renderer)
    await render_tree(tree, renderer=fake_renderer)

    assert len(fake_renderer.calls) == 1


def test_render_html_returns_serialised_document(fake_renderer: Any) -> None:
    html = '<p>x</p><pre><code class="language-infographic">A</code></pre>'

    assert render_html(html, renderer=fake_renderer) == "<p>x</p><svg>A</svg>"


def test_render_html_accepts_option_keywords(fake_renderer: Any) -> None:
    render_html('<pre class="infographic">A</pre>', renderer=fake_renderer, width=200)

    assert fake_renderer.calls[0][1]["width"] == 200


def test_render_markdown_document(fake_renderer: Any) -> None:
    source = "# Title\n\n```infographic\ninfographic list\n```\n\n```python\nprint()\n```\n"

    html = render_markdown_document(source, renderer=fake_renderer)

    assert "<svg>infographic list</svg>" in html
    assert "print" in html
    assert [payload.strip() for payload, _ in fake_renderer.calls] == ["infographic list"]


def test_render_path_detects_markdown(tmp_path: Path, fake_renderer: Any) -> None:
    source = tmp_path / "doc.md"
    source.write_text("```infographic\nA\n```\n", encoding="utf-8")

    html = render_path(source, renderer=fake_renderer)

    assert "<svg>A</svg>" in html


def test_render_path_reads_html(tmp_path: Path, fake_renderer: Any) -> None:
    source = tmp_path / "doc.html"
    source.write_text('<pre class="infographic">A</pre>', encoding="utf-8")

    assert render_path(source, renderer=fake_renderer) == "<svg>A</svg>"


def test_render_path_reports_source_path(tmp_path: Path, make_renderer: Any) -> None:
    source = tmp_path / "doc.html"
    source.write_text('<pre class="infographic">A</pre>', encoding="utf-8")
    renderer = make_renderer({"A": RuntimeError("boom")})
    messages: list[str] = []

    class Recorder:
        debug_enabled = False

        def warning(self, message, exc=None):
            messages.append(message)

        def error(self, message, exc=None):
            messages.append(message)

        def event(self, name, payload):
            return None

    context = ProcessingContext(path=source, emitter=Recorder())
    with pytest.raises(InfographicRenderError):
        render_path(source, renderer=renderer, context=context)

    assert messages == [f"{source}: Failed to render infographic: boom"]


def test_markdown_front_matter_reaches_context_and_renderer(fake_renderer: Any) -> None:
    source = (
        "---\n"
        "title: Quarterly\n"
        "infographic:\n"
        "  width: 480\n"
        "  infographicOptions:\n"
        "    theme: dark\n"
        "---\n"
        "```infographic\nA\n```\n"
    )
    context = ProcessingContext()

    html = render_markdown_document(source, renderer=fake_renderer, context=context, height=90)

    assert "<svg>A</svg>" in html
    assert "Quarterly" not in html
    assert context.metadata["title"] == "Quarterly"
    assert fake_renderer.calls[0][1] == {"width": 480, "height": 90, "theme": "dark"}
