from __future__ import annotations

from bs4 import BeautifulSoup

from infosmith.adapters.markdown import render_markdown, split_front_matter
from infosmith.core.collector import collect


def test_infographic_fence_becomes_marked_pre() -> None:
    document = render_markdown("```infographic\ninfographic list\ndata\n```\n")

    tree = BeautifulSoup(document.html, "html.parser")
    pre = tree.find("pre")
    assert pre is not None
    assert pre["class"] == ["infographic"]
    assert "infographic list\ndata" in pre.get_text()


def test_rendered_markdown_feeds_the_collector() -> None:
    document = render_markdown("Intro\n\n```infographic\nA\n```\n\n```infographic\nB\n```\n")

    jobs = collect(BeautifulSoup(document.html, "html.parser"))

    assert [job.payload.strip() for job in jobs] == ["A", "B"]


def test_fence_language_follows_marker() -> None:
    document = render_markdown("```chart\nbar\n```\n", language="chart")

    assert '<pre class="chart">' in document.html


def test_plain_fenced_code_extension_uses_language_class() -> None:
    document = render_markdown("```infographic\nA\n```\n", extensions=["fenced_code"])

    assert 'class="language-infographic"' in document.html
    assert len(collect(BeautifulSoup(document.html, "html.parser"))) == 1


def test_front_matter_is_split() -> None:
    document = render_markdown("---\ntitle: Report\n---\nBody\n")

    assert document.front_matter == {"title": "Report"}
    assert "Report" not in document.html
    assert "<p>Body</p>" in document.html


def test_split_front_matter_without_block() -> None:
    assert split_front_matter("# Title\n") == ({}, "# Title\n")


def test_split_front_matter_with_invalid_yaml() -> None:
    source = "---\n: [\n---\nBody\n"

    assert split_front_matter(source) == ({}, source)
