"""Implementation of the `infosmith render` command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import typer

from infosmith.adapters.fallbacks import resolve_fallback
from infosmith.adapters.renderers import resolve_renderer
from infosmith.api import render_path
from infosmith.core.config import resolve_config
from infosmith.core.context import ProcessingContext
from infosmith.core.exceptions import ConfigurationError, InfographicRenderError

from .._options import (
    CommandOption,
    DebugOption,
    HeightOption,
    InputPathArgument,
    LanguageOption,
    MarkdownOption,
    OnErrorOption,
    OutputPathOption,
    RendererOptionOption,
    TimeoutOption,
    VerboseOption,
    WidthOption,
)
from ..diagnostics import CliEmitter
from ..state import report, set_cli_state


def parse_option_overrides(values: list[str] | None) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` pairs into a mapping, decoding JSON values."""
    overrides: dict[str, Any] = {}
    for raw in values or []:
        key, separator, value = raw.partition("=")
        key = key.strip()
        if not separator or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{raw}'", param_hint="--option")
        try:
            overrides[key] = json.loads(value)
        except json.JSONDecodeError:
            overrides[key] = value
    return overrides


def _coerce_dimension(value: str | None) -> str | int | float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return value
    return int(number) if number.is_integer() else number


def write_output_file(target: Path, content: str) -> None:
    """Persist rendered HTML to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write output to '{target}': {exc}") from exc


def render(
    input_path: InputPathArgument,
    output: OutputPathOption = None,
    markdown: MarkdownOption = None,
    language: LanguageOption = None,
    width: WidthOption = None,
    height: HeightOption = None,
    option: RendererOptionOption = None,
    command: CommandOption = None,
    timeout: TimeoutOption = None,
    on_error: OnErrorOption = "fail",
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render the infographic blocks of a Markdown or HTML document to SVG."""
    ctx = click.get_current_context(silent=True)
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    emitter = CliEmitter(state=state)

    try:
        config = resolve_config(
            width=_coerce_dimension(width),
            height=_coerce_dimension(height),
            language=language,
            renderer_options=parse_option_overrides(option) or None,
            fallback=resolve_fallback(on_error),
        )
    except ConfigurationError as exc:
        report("error", str(exc), exception=exc)
        raise typer.Exit(code=2) from exc

    context = ProcessingContext(path=input_path, emitter=emitter)
    renderer = resolve_renderer(command, timeout=timeout)

    try:
        html = render_path(
            input_path,
            markdown=markdown,
            renderer=renderer,
            config=config,
            context=context,
        )
    except InfographicRenderError as exc:
        # Already reported through the emitter.
        if debug:
            raise
        raise typer.Exit(code=1) from exc
    except ConfigurationError as exc:
        report("error", str(exc), exception=exc)
        raise typer.Exit(code=2) from exc

    if output is None:
        typer.echo(html)
    else:
        write_output_file(output, html)
        report("info", f"Wrote {output}")
    report("info", emitter.summary())
