"""Per-invocation processing context shared with fallback policies."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import InfographicRenderError


RULE_ID = "infographic"
SOURCE = "infosmith"
DOCUMENTATION_URL = "https://github.com/antv/infographic"


@dataclass(slots=True)
class PipelineMessage:
    """Diagnostic recorded while processing a document."""

    reason: str
    rule_id: str = RULE_ID
    source: str = SOURCE
    ancestors: tuple[Any, ...] = ()
    fatal: bool | None = None
    url: str | None = None
    cause: BaseException | None = None


@dataclass
class ProcessingContext:
    """State attached to a single pipeline run.

    The context plays the role of the document being processed: it names the
    source, collects messages, and is handed to fallback policies so they can
    report their own diagnostics.

    ``metadata`` holds the front matter of Markdown sources.
    """

    path: Path | str | None = None
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    messages: list[PipelineMessage] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def message(
        self,
        reason: str,
        *,
        ancestors: Sequence[Any] = (),
        cause: BaseException | None = None,
        rule_id: str = RULE_ID,
        source: str = SOURCE,
        fatal: bool | None = False,
        url: str | None = None,
    ) -> PipelineMessage:
        """Record a message and forward it to the emitter."""
        entry = PipelineMessage(
            reason=reason,
            rule_id=rule_id,
            source=source,
            ancestors=tuple(ancestors),
            fatal=fatal,
            url=url,
            cause=cause,
        )
        self.messages.append(entry)
        if fatal:
            self.emitter.error(self._locate(reason), cause)
        else:
            self.emitter.warning(self._locate(reason), cause)
        return entry

    def fail(
        self,
        reason: str,
        *,
        ancestors: Sequence[Any] = (),
        cause: BaseException | None = None,
    ) -> InfographicRenderError:
        """Record a fatal message and return the matching pipeline error."""
        entry = self.message(
            reason,
            ancestors=ancestors,
            cause=cause,
            fatal=True,
            url=DOCUMENTATION_URL,
        )
        return InfographicRenderError(
            entry.reason,
            rule_id=entry.rule_id,
            source=entry.source,
            ancestors=entry.ancestors,
            url=entry.url,
        )

    @property
    def fatal_messages(self) -> list[PipelineMessage]:
        return [entry for entry in self.messages if entry.fatal]

    def _locate(self, reason: str) -> str:
        if self.path is None:
            return reason
        return f"{self.path}: {reason}"


__all__ = [
    "DOCUMENTATION_URL",
    "RULE_ID",
    "SOURCE",
    "PipelineMessage",
    "ProcessingContext",
]
