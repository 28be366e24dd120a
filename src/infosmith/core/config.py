"""Configuration model used by the infographic pipeline.

InfographicConfig

`width` (`str | int | float`)
: Width forwarded to the renderer for every block. Defaults to ``"100%"``.

`height` (`str | int | float`)
: Height forwarded to the renderer for every block. Defaults to ``"auto"``.

`renderer_options` (`dict[str, Any]`)
: Renderer specific overrides merged over ``width``/``height`` when a block
  is rendered. Also accepted under the ``infographicOptions`` alias.

`fallback` (`Callable | None`)
: Policy invoked as ``fallback(node, payload, error, context)`` when a block
  fails to render. Returning a node substitutes it, returning ``None`` removes
  the block. Without a policy the first failure aborts the whole run. Also
  accepted under the ``errorFallback`` alias.

`language` (`str`)
: Marker language identifying the blocks to render (``infographic``).

`parser` (`str`)
: BeautifulSoup backend used to parse input documents.

`artifact_parser` (`str`)
: BeautifulSoup backend used to parse rendered markup. The XML backend keeps
  SVG attribute casing (``viewBox``) intact; markup that is not well-formed
  XML is parsed with ``html.parser`` instead.

Markdown documents may set `width`, `height` and `infographicOptions` for
their own blocks in an ``infographic`` front matter table. Explicit options
still win.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


DEFAULT_WIDTH = "100%"
DEFAULT_HEIGHT = "auto"
DEFAULT_LANGUAGE = "infographic"
DOCUMENT_OPTIONS_KEY = "infographic"
DOCUMENT_FIELDS = frozenset({"width", "height", "renderer_options", "infographicOptions"})


class InfographicConfig(BaseModel):
    """Options controlling how infographic blocks are rendered."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    width: str | int | float = DEFAULT_WIDTH
    height: str | int | float = DEFAULT_HEIGHT
    renderer_options: dict[str, Any] = Field(
        default_factory=dict, alias="infographicOptions"
    )
    fallback: Callable[..., Any] | None = Field(default=None, alias="errorFallback")
    language: str = DEFAULT_LANGUAGE
    parser: str = "html.parser"
    artifact_parser: str = "xml"

    @field_validator("width", "height")
    @classmethod
    def _validate_dimension(cls, value: str | int | float) -> str | int | float:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("dimension must not be empty")
        elif value < 0:
            raise ValueError("dimension must be positive")
        return value

    @field_validator("language")
    @classmethod
    def _validate_language(cls, value: str) -> str:
        value = value.strip()
        if not value or any(char.isspace() for char in value):
            raise ValueError("language must be a single non-empty token")
        return value

    def render_options(self) -> dict[str, Any]:
        """Return the options passed to the renderer for each block."""
        return {"width": self.width, "height": self.height, **self.renderer_options}


def resolve_config(
    options: InfographicConfig | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> InfographicConfig:
    """Merge user options over the defaults, field by field.

    ``None`` values are treated as unset so CLI flags left empty keep the
    defaults.
    """
    if isinstance(options, InfographicConfig):
        values: dict[str, Any] = options.model_dump(exclude_unset=True)
    elif options is None:
        values = {}
    elif isinstance(options, Mapping):
        values = dict(options)
    else:
        raise ConfigurationError(
            f"Unsupported options type: {type(options).__name__}"
        )

    values.update(overrides)
    values = {key: value for key, value in values.items() if value is not None}

    try:
        return InfographicConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid infographic options: {exc}") from exc


def with_document_options(
    config: InfographicConfig, front_matter: Mapping[str, Any]
) -> InfographicConfig:
    """Layer the ``infographic`` front matter table under ``config``.

    Values set explicitly on ``config`` win; renderer options are merged key by
    key. Only dimensions and renderer options may come from a document.
    """
    table = front_matter.get(DOCUMENT_OPTIONS_KEY)
    if table is None:
        return config
    if not isinstance(table, Mapping):
        raise ConfigurationError(
            f"Front matter '{DOCUMENT_OPTIONS_KEY}' must be a mapping, "
            f"got {type(table).__name__}"
        )
    unknown = sorted(str(key) for key in table if key not in DOCUMENT_FIELDS)
    if unknown:
        raise ConfigurationError(
            f"Unsupported front matter '{DOCUMENT_OPTIONS_KEY}' keys: {', '.join(unknown)}"
        )

    document = resolve_config(table).model_dump(exclude_unset=True)
    explicit = config.model_dump(exclude_unset=True)
    merged = {**document, **explicit}
    if "renderer_options" in document and "renderer_options" in explicit:
        merged["renderer_options"] = {
            **document["renderer_options"],
            **explicit["renderer_options"],
        }
    return resolve_config(merged)


__all__ = [
    "DEFAULT_HEIGHT",
    "DEFAULT_LANGUAGE",
    "DEFAULT_WIDTH",
    "DOCUMENT_OPTIONS_KEY",
    "InfographicConfig",
    "resolve_config",
    "with_document_options",
]
