"""Core pipeline: block detection, collection and substitution."""

from .collector import RenderJob, collect
from .config import InfographicConfig, resolve_config
from .context import PipelineMessage, ProcessingContext
from .exceptions import (
    ConfigurationError,
    InfographicRenderError,
    InfosmithError,
    RendererExecutionError,
)
from .matcher import is_candidate
from .pipeline import run
from .substitution import RenderOutcome, Renderer, render_all, substitute


__all__ = [
    "ConfigurationError",
    "InfographicConfig",
    "InfographicRenderError",
    "InfosmithError",
    "PipelineMessage",
    "ProcessingContext",
    "RenderJob",
    "RenderOutcome",
    "Renderer",
    "RendererExecutionError",
    "collect",
    "is_candidate",
    "render_all",
    "resolve_config",
    "run",
    "substitute",
]
