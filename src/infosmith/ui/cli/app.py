"""Typer application wiring for the infosmith CLI."""

from __future__ import annotations

import typer

from .commands import render
from .state import debug_enabled, get_cli_state, report


app = typer.Typer(
    help="Render infographic code blocks of Markdown and HTML documents to SVG.",
    context_settings={"help_option_names": ["--help"]},
)


@app.callback()
def _root() -> None:
    """Render infographic code blocks of Markdown and HTML documents to SVG."""


app.command()(render)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        report("error", "Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            report("error", str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
