"""Custom exception hierarchy for the infographic rendering pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class InfosmithError(RuntimeError):
    """Base exception for infographic rendering failures."""


class ConfigurationError(InfosmithError):
    """Raised when pipeline options cannot be validated."""


class RendererExecutionError(InfosmithError):
    """Raised when an external renderer fails to produce markup."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class InfographicRenderError(InfosmithError):
    """Fatal pipeline error raised when a block fails without a fallback.

    The attributes mirror the message recorded on the processing context so
    callers can report the failing block without parsing the text.
    """

    def __init__(
        self,
        message: str,
        *,
        rule_id: str,
        source: str,
        ancestors: Sequence[Any] = (),
        url: str | None = None,
        fatal: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.rule_id = rule_id
        self.source = source
        self.ancestors = tuple(ancestors)
        self.url = url
        self.fatal = fatal

    @property
    def node(self) -> Any:
        """Return the failing block, i.e. the last inclusive ancestor."""
        return self.ancestors[-1] if self.ancestors else None


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


def describe_failure(error: object) -> str:
    """Return the message embedded in fatal reports for a render failure."""
    if isinstance(error, BaseException):
        text = str(error).strip()
        return text or error.__class__.__name__
    return str(error)


__all__ = [
    "ConfigurationError",
    "InfographicRenderError",
    "InfosmithError",
    "RendererExecutionError",
    "describe_failure",
    "exception_hint",
    "exception_messages",
]
