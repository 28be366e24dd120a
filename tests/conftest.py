from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest


class FakeRenderer:
    """Renderer double returning ``<svg>payload</svg>`` unless told otherwise."""

    def __init__(
        self,
        results: Mapping[str, str | BaseException] | None = None,
        *,
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self.results = dict(results or {})
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.completed: list[str] = []

    async def __call__(self, payload: str, options: Mapping[str, Any]) -> str:
        key = payload.strip()
        self.calls.append((payload, dict(options)))
        delay = self.delays.get(key, 0)
        if delay:
            await asyncio.sleep(delay)
        self.completed.append(key)
        outcome = self.results.get(key)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is not None:
            return outcome
        return f"<svg>{key}</svg>"


@pytest.fixture
def make_renderer() -> type[FakeRenderer]:
    return FakeRenderer


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()
