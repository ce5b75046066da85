"""Shared fixtures: scripted transports and a fast test configuration."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from estate_api import ApiConfig, MemoryStorage, RequestExecutor
from estate_api.transport import HTTPTransport
from estate_api.types import AbortSignal, PreparedRequest, RawResponse

# Outcome that never completes on its own; only an abort ends it.
HANG = object()


def json_response(status: int = 200, body: Any = None) -> RawResponse:
    payload = b"" if body is None else json.dumps(body).encode()
    return RawResponse(status=status, headers={"Content-Type": "application/json"}, body=payload)


def text_response(status: int, text: str) -> RawResponse:
    return RawResponse(status=status, headers={"Content-Type": "text/plain"}, body=text.encode())


class ScriptedTransport(HTTPTransport):
    """Transport that plays back a list of outcomes.

    Each outcome is a RawResponse, an exception instance, or HANG. The last
    outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: Any, name: str = "scripted") -> None:
        self.name = name
        self.outcomes = list(outcomes) or [json_response(200, {"success": True})]
        self.requests: list[PreparedRequest] = []
        self.signals: list[AbortSignal | None] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def _play(self, outcome: Any) -> RawResponse:
        if outcome is HANG:
            await asyncio.Event().wait()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def send(self, request: PreparedRequest, signal: AbortSignal | None = None) -> RawResponse:
        self.requests.append(request)
        self.signals.append(signal)
        index = min(len(self.requests), len(self.outcomes)) - 1
        return await self._abortable(self._play(self.outcomes[index]), signal)


@pytest.fixture
def config() -> ApiConfig:
    """Configuration with tiny timeouts and no retry delay."""
    return ApiConfig(
        timeout=0.05,
        slow_timeout=0.05,
        extended_timeout=0.05,
        retry_attempts=3,
        retry_delay=0.0,
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def make_executor(config, storage):
    """Build an executor around scripted transports."""

    def _make(primary: HTTPTransport, fallback: HTTPTransport | None = None, **kwargs: Any) -> RequestExecutor:
        return RequestExecutor(
            kwargs.pop("config", config),
            storage,
            primary,
            fallback or ScriptedTransport(name="fallback"),
            **kwargs,
        )

    return _make
