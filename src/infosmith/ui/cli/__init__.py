"""Public CLI exports for infosmith."""

from __future__ import annotations

from .app import app, main
from .commands import render
from .diagnostics import CliEmitter
from .state import debug_enabled, get_cli_state, report


__all__ = [
    "CliEmitter",
    "app",
    "debug_enabled",
    "get_cli_state",
    "main",
    "render",
    "report",
]
