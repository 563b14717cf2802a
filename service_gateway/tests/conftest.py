"""
Shared fixtures for Gateway tests.
"""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from service_gateway.app.caching.response_cache import ResponseCache
from service_gateway.app.gateway.client import ProviderGateway
from service_gateway.app.gateway.providers import AuthStyle, ProviderConfig


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport:
    """Mock transport that records every request it answers."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def provider_factory():
    def _make(**overrides) -> ProviderConfig:
        values: Dict[str, Any] = {
            "provider_name": "test_provider",
            "base_url": "https://api.example.test",
            "api_key_env_var": "TEST_API_KEY",
            "auth_style": AuthStyle.HEADER_BEARER,
            "api_key": "secret-key",
            "cache_duration_seconds": 900,
        }
        values.update(overrides)
        return ProviderConfig(**values)
    return _make


@pytest.fixture
def gateway_factory(provider_factory, fake_clock):
    """Build a ProviderGateway wired to a RecordingTransport."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        *,
        embedded_error=None,
        cache: Optional[ResponseCache] = None,
        **provider_overrides,
    ):
        recorder = RecordingTransport(handler)
        provider = provider_factory(**provider_overrides)
        gateway = ProviderGateway(
            provider,
            cache=cache,
            embedded_error=embedded_error,
            transport=recorder.transport,
            clock=fake_clock,
        )
        return gateway, recorder

    return _make


@pytest.fixture
def recorder_factory():
    """Build a RecordingTransport around a request handler."""
    return RecordingTransport
