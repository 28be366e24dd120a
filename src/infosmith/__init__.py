"""Render infographic code blocks of HTML documents to inline SVG."""

from __future__ import annotations

from infosmith.adapters.fallbacks import keep_source, placeholder, remove_block
from infosmith.adapters.renderers import CallableRenderer, CommandRenderer, NodeSsrRenderer
from infosmith.api import render_html, render_markdown_document, render_path, render_tree
from infosmith.core import (
    ConfigurationError,
    InfographicConfig,
    InfographicRenderError,
    InfosmithError,
    PipelineMessage,
    ProcessingContext,
    RendererExecutionError,
    RenderJob,
    collect,
    is_candidate,
    run,
)
from infosmith.version import get_version


__version__ = get_version()

__all__ = [
    "CallableRenderer",
    "CommandRenderer",
    "ConfigurationError",
    "InfographicConfig",
    "InfographicRenderError",
    "InfosmithError",
    "NodeSsrRenderer",
    "PipelineMessage",
    "ProcessingContext",
    "RenderJob",
    "RendererExecutionError",
    "__version__",
    "collect",
    "is_candidate",
    "keep_source",
    "placeholder",
    "remove_block",
    "render_html",
    "render_markdown_document",
    "render_path",
    "render_tree",
    "run",
]
