from __future__ import annotations

import logging

import pytest

from infosmith.core.context import DOCUMENTATION_URL, ProcessingContext
from infosmith.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    ensure_emitter,
    format_event_message,
)
from infosmith.core.exceptions import (
    InfographicRenderError,
    describe_failure,
    exception_hint,
    exception_messages,
)


class _Recorder:
    debug_enabled = False

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[tuple[str, BaseException | None]] = []
        self.events: list[tuple[str, dict]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append((message, exc))

    def event(self, name: str, payload) -> None:
        self.events.append((name, dict(payload)))


def test_emitters_satisfy_protocol() -> None:
    assert isinstance(NullEmitter(), DiagnosticEmitter)
    assert isinstance(LoggingEmitter(), DiagnosticEmitter)
    assert isinstance(ensure_emitter(None), NullEmitter)
    recorder = _Recorder()
    assert ensure_emitter(recorder) is recorder


def test_logging_emitter_routes_levels(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("infosmith.tests"))

    with caplog.at_level(logging.DEBUG, logger="infosmith.tests"):
        emitter.warning("careful")
        emitter.error("broken", ValueError("x"))
        emitter.event("infographic_collected", {"count": 2})
        emitter.event("custom", {"key": "value"})

    levels = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert levels == [
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
        (logging.INFO, "Found 2 infographic blocks"),
        (logging.DEBUG, "diagnostic event custom: {'key': 'value'}"),
    ]


def test_format_event_message() -> None:
    assert format_event_message("infographic_collected", {"count": 1}) == (
        "Found 1 infographic block"
    )
    assert format_event_message("infographic_rendered", {"succeeded": 2, "failed": 1}) == (
        "Rendered 2 infographic(s), 1 failed"
    )
    assert format_event_message("infographic_fallback", {"action": "remove"}) == (
        "Applied infographic fallback (remove)"
    )
    assert format_event_message("parser_fallback", {"preferred": "lxml"}) == (
        "Parser 'lxml' unavailable, using 'html.parser'"
    )
    assert format_event_message("artifact_fallback", {"preferred": "xml"}) == (
        "Rendered markup is not well-formed XML, parsing it with 'html.parser'"
    )
    assert format_event_message("unknown", {}) is None


def test_context_message_forwards_warning_with_path() -> None:
    recorder = _Recorder()
    context = ProcessingContext(path="doc.md", emitter=recorder)

    entry = context.message("Odd block")

    assert recorder.warnings == ["doc.md: Odd block"]
    assert entry.fatal is False
    assert context.messages == [entry]
    assert context.fatal_messages == []


def test_context_fail_records_fatal_message() -> None:
    recorder = _Recorder()
    context = ProcessingContext(emitter=recorder)
    cause = RuntimeError("renderer crashed")

    error = context.fail("renderer crashed", ancestors=("root", "pre"), cause=cause)

    assert isinstance(error, InfographicRenderError)
    assert error.rule_id == "infographic"
    assert error.source == "infosmith"
    assert error.url == DOCUMENTATION_URL
    assert error.fatal is True
    assert error.node == "pre"
    assert recorder.errors == [("renderer crashed", cause)]
    assert [entry.reason for entry in context.fatal_messages] == ["renderer crashed"]


def test_exception_helpers() -> None:
    try:
        try:
            raise OSError("disk unavailable")
        except OSError as exc:
            raise RuntimeError("render failed") from exc
    except RuntimeError as error:
        chained = error

    assert exception_messages(chained) == ["render failed", "disk unavailable"]
    assert exception_hint(chained) == "disk unavailable"
    assert exception_hint(ValueError()) is None


def test_describe_failure() -> None:
    assert describe_failure(ValueError("bad spec")) == "bad spec"
    assert describe_failure(TimeoutError()) == "TimeoutError"
    assert describe_failure("plain") == "plain"
