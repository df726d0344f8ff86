"""Shared test fixtures for the perplexity-mcp test suite.

No test touches the network: HTTP goes through ``httpx.MockTransport`` and
every request the client sends is recorded for inspection.
"""

import json
from dataclasses import dataclass, field
from typing import Callable

import httpx
import pytest

from perplexity_mcp.client import ChatCompletionClient
from perplexity_mcp.dispatcher import Dispatcher
from perplexity_mcp.settings import Settings


class BrokenStream(httpx.AsyncByteStream):
    """Response body whose connection drops before any bytes arrive."""

    async def __aiter__(self):
        raise httpx.ReadError("connection reset")
        yield b""  # pragma: no cover


@dataclass
class FakePerplexity:
    """Records outgoing requests and replies with a canned response."""
    status_code: int = 200
    body: dict | str = field(default_factory=lambda: {
        "choices": [{"message": {"content": "Hi"}}],
    })
    error: Exception | None = None
    stream: httpx.AsyncByteStream | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.stream is not None:
            return httpx.Response(self.status_code, stream=self.stream)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def fake_api() -> FakePerplexity:
    return FakePerplexity()


@pytest.fixture
def broken_stream() -> BrokenStream:
    return BrokenStream()


@pytest.fixture
def make_client(fake_api: FakePerplexity) -> Callable[[Settings], ChatCompletionClient]:
    """Factory: ChatCompletionClient wired to fake_api."""

    def _make(settings: Settings) -> ChatCompletionClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
        return ChatCompletionClient(settings, http_client=http)

    return _make


@pytest.fixture
def make_dispatcher(make_client) -> Callable[..., Dispatcher]:
    """Factory: Dispatcher over a fake API, optionally with a default domain filter."""

    def _make(default_domain_filter: tuple[str, ...] = ()) -> Dispatcher:
        settings = Settings(api_key="test-key", default_domain_filter=default_domain_filter)
        return Dispatcher(settings, client=make_client(settings))

    return _make


@pytest.fixture
def user_messages() -> list[dict]:
    return [
        {"role": "system", "content": "Be precise."},
        {"role": "user", "content": "What is the capital of France?"},
    ]
