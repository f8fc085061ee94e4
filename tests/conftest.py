from __future__ import annotations

import asyncio
import os
from typing import Callable

import httpx
import pytest

from core.domain.models import PreparedRequest, RequestSuccess


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep user env vars and .env files out of the tests."""

    for key in list(os.environ):
        if key.upper().startswith("JCURL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request the server side received."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.received: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.received.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport


class FakeExecutor:
    """Executor double: optional per-URL delay, error or payload."""

    def __init__(
        self,
        *,
        delays: dict[str, float] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls: list[PreparedRequest] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def execute(self, request: PreparedRequest) -> RequestSuccess:
        self.calls.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(request.url, 0))
            if request.url in self.errors:
                raise self.errors[request.url]
            return RequestSuccess(url=request.url, status_code=200, payload={"url": request.url})
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_executor_cls() -> type[FakeExecutor]:
    return FakeExecutor
