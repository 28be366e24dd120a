"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Markdown (.md) or HTML (.html) document holding infographic blocks.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MarkdownOption = Annotated[
    bool | None,
    typer.Option(
        "--markdown/--html",
        help="Force the input format instead of guessing it from the file suffix.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

LanguageOption = Annotated[
    str | None,
    typer.Option(
        "--language",
        help="Fence language marking the blocks to render.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

WidthOption = Annotated[
    str | None,
    typer.Option("--width", help="Width of rendered infographics.", rich_help_panel=RENDERING_PANEL),
]

HeightOption = Annotated[
    str | None,
    typer.Option(
        "--height", help="Height of rendered infographics.", rich_help_panel=RENDERING_PANEL
    ),
]

RendererOptionOption = Annotated[
    list[str] | None,
    typer.Option(
        "--option",
        "-O",
        metavar="KEY=VALUE",
        help="Renderer option override. Values are parsed as JSON when possible.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

CommandOption = Annotated[
    str | None,
    typer.Option(
        "--command",
        help="External renderer command reading JSON on stdin and printing SVG.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        min=0.0,
        help="Seconds allowed for each block before the renderer gives up.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

OnErrorOption = Annotated[
    str,
    typer.Option(
        "--on-error",
        help="What to do with blocks that fail to render: fail, keep, remove, placeholder.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the rendered HTML to this file instead of stdout.",
        dir_okay=False,
        writable=True,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
