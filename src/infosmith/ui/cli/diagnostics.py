"""Emitter printing pipeline diagnostics and tallying what happened to each block."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any

from infosmith.core.diagnostics import format_event_message

from .state import CLIState, get_cli_state, report


FALLBACK_VERBS = {"keep": "kept", "remove": "removed", "replace": "replaced"}


class CliEmitter:
    """Report diagnostics on stderr and keep per-run block counts."""

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = self._state.show_tracebacks
        self.collected = 0
        self.rendered = 0
        self.failed = 0
        self.fallbacks: Counter[str] = Counter()

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        report("warning", message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        report("error", message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        if name == "infographic_collected":
            self.collected += data.get("count", 0)
        elif name == "infographic_rendered":
            self.rendered += data.get("succeeded", 0)
            self.failed += data.get("failed", 0)
        elif name == "infographic_fallback":
            self.fallbacks[data.get("action") or "replace"] += 1

        message = format_event_message(name, data)
        if message:
            report("info", message)

    def summary(self) -> str:
        """Return a one-line account of the run."""
        if not self.collected:
            return "No infographic blocks found"
        parts = [f"{self.rendered} rendered"]
        if self.failed:
            parts.append(f"{self.failed} failed")
        for action, count in sorted(self.fallbacks.items()):
            parts.append(f"{count} {FALLBACK_VERBS.get(action, action)}")
        return f"{self.collected} infographic block(s): {', '.join(parts)}"


__all__ = ["CliEmitter"]
