from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from infosmith.adapters.fallbacks import (
    PLACEHOLDER_CLASS,
    keep_source,
    placeholder,
    remove_block,
    resolve_fallback,
)
from infosmith.core.context import ProcessingContext
from infosmith.core.exceptions import ConfigurationError, RendererExecutionError


def _block():
    soup = BeautifulSoup('<pre class="infographic">A</pre>', "html.parser")
    return soup.pre


def test_placeholder_wraps_message_and_source() -> None:
    context = ProcessingContext()
    policy = placeholder()

    container = policy(_block(), "infographic list", RendererExecutionError("boom"), context)

    assert container.name == "div"
    assert container["class"] == [PLACEHOLDER_CLASS]
    assert container.p.get_text() == "Failed to render infographic: boom"
    assert container.pre.get_text() == "infographic list"
    assert [entry.reason for entry in context.messages] == ["Failed to render infographic: boom"]
    assert context.messages[0].fatal is False


def test_placeholder_without_source() -> None:
    policy = placeholder("Chart unavailable", include_source=False)

    container = policy(_block(), "A", ValueError("x"), ProcessingContext())

    assert container.pre is None
    assert container.p.get_text() == "Chart unavailable"


def test_keep_source_returns_the_node() -> None:
    node = _block()
    context = ProcessingContext()

    assert keep_source(node, "A", ValueError(), context) is node
    assert context.messages[0].reason == "Keeping infographic source: ValueError"


def test_remove_block_returns_none() -> None:
    context = ProcessingContext()

    assert remove_block(_block(), "A", ValueError("gone"), context) is None
    assert context.messages[0].reason == "Removed infographic block: gone"


def test_resolve_fallback_names() -> None:
    assert resolve_fallback("fail") is None
    assert resolve_fallback(" Keep ") is keep_source
    assert resolve_fallback("remove") is remove_block
    assert callable(resolve_fallback("placeholder"))


def test_resolve_fallback_rejects_unknown_names() -> None:
    with pytest.raises(ConfigurationError, match="expected one of"):
        resolve_fallback("retry")
