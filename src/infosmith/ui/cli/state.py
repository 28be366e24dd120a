"""Verbosity settings and stderr reporting for the CLI."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
import sys

import click
from rich.console import Console
from rich.text import Text

from infosmith.core.exceptions import exception_hint


LEVEL_STYLES = {"warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Options shared by every message the CLI prints."""

    verbosity: int = 0
    show_tracebacks: bool = False

    @property
    def err_console(self) -> Console:
        # Bound to the current stream so redirected stderr is honoured.
        return Console(file=sys.stderr, highlight=False)


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("infosmith_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None) -> CLIState:
    """Return the state attached to the running command, creating it on first use."""
    if ctx is None:
        ctx = click.get_current_context(silent=True)
    if ctx is not None:
        state = ctx.ensure_object(CLIState)
        _STATE_VAR.set(state)
        return state

    state = _STATE_VAR.get()
    if state is None:
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int = 0,
    debug: bool = False,
) -> CLIState:
    state = get_cli_state(ctx)
    state.verbosity = max(0, verbosity)
    state.show_tracebacks = debug
    return state


def report(level: str, message: str, *, exception: BaseException | None = None) -> None:
    """Print a message on stderr.

    Info messages only appear with ``-v``. With ``-v`` warnings and errors also
    name the innermost cause of ``exception``, and with ``-vv`` its type.
    """
    state = get_cli_state()
    if level == "info":
        if state.verbosity >= 1:
            state.err_console.print(message, style="dim", markup=False)
        return

    style = LEVEL_STYLES.get(level, "yellow")
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        hint = exception_hint(exception)
        if hint and hint not in message:
            text.append(f"\ncaused by: {hint}", style=style)
        if state.verbosity >= 2:
            text.append(f"\ntype: {type(exception).__name__}", style=style)
    state.err_console.print(text)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    return get_cli_state().show_tracebacks


__all__ = [
    "CLIState",
    "debug_enabled",
    "get_cli_state",
    "report",
    "set_cli_state",
]
