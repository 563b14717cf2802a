"""
Tests for the External API Gateway: key validation, caching and error classification.
"""

import json

import httpx
import pytest
from prometheus_client import CollectorRegistry

from shared.errors import ClassifiedError, ErrorKind
from shared.metrics import MetricsCollector
from service_gateway.app.gateway.classification import classify_status
from service_gateway.app.gateway.client import ProviderGateway
from service_gateway.app.gateway.providers import AuthStyle


PAYLOAD = {"status": "OK", "results": [{"c": 105.0}]}


def ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=PAYLOAD)


def status_handler(status_code: int):
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"message": "provider says no"})
    return _handler


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "status_code,kind",
        [
            (401, ErrorKind.KEY_INVALID),
            (403, ErrorKind.KEY_INVALID),
            (429, ErrorKind.RATE_LIMITED),
            (400, ErrorKind.BAD_PARAMETERS),
            (500, ErrorKind.SERVICE_UNAVAILABLE),
            (502, ErrorKind.SERVICE_UNAVAILABLE),
            (503, ErrorKind.SERVICE_UNAVAILABLE),
            (404, ErrorKind.UNKNOWN),
            (302, ErrorKind.UNKNOWN),
        ],
    )
    def test_fixed_table(self, status_code, kind):
        assert classify_status(status_code) is kind

    def test_success_is_not_classified(self):
        assert classify_status(200) is None
        assert classify_status(204) is None

    def test_overrides_take_precedence(self):
        overrides = {404: ErrorKind.BAD_PARAMETERS, 500: ErrorKind.UNKNOWN}
        assert classify_status(404, overrides) is ErrorKind.BAD_PARAMETERS
        assert classify_status(500, overrides) is ErrorKind.UNKNOWN
        assert classify_status(503, overrides) is ErrorKind.SERVICE_UNAVAILABLE


class TestFetchEndpoint:
    @pytest.mark.asyncio
    async def test_identical_requests_within_window_hit_cache(self, gateway_factory, fake_clock):
        gateway, recorder = gateway_factory(ok_handler)
        request = gateway.build_request("/v2/aggs/ticker/AAPL/prev")

        first = await gateway.fetch_endpoint(request, "stock quote")
        fake_clock.advance(899)
        second = await gateway.fetch_endpoint(gateway.build_request("/v2/aggs/ticker/AAPL/prev"), "stock quote")

        assert first == PAYLOAD
        assert second == PAYLOAD
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_expired_entry_is_refetched_and_overwritten(self, gateway_factory, fake_clock):
        responses = iter([{"version": 1}, {"version": 2}])

        def handler(request):
            return httpx.Response(200, json=next(responses))

        gateway, recorder = gateway_factory(handler)
        request = gateway.build_request("/items")

        assert await gateway.fetch_endpoint(request, "items") == {"version": 1}
        fake_clock.advance(900)
        assert await gateway.fetch_endpoint(request, "items") == {"version": 2}

        assert recorder.calls == 2
        assert len(gateway.cache) == 1
        assert gateway.cache.lookup(request.cache_key).payload == {"version": 2}

    @pytest.mark.asyncio
    async def test_different_query_parameters_are_different_keys(self, gateway_factory):
        gateway, recorder = gateway_factory(ok_handler)

        await gateway.fetch_endpoint(gateway.build_request("/search", {"q": "apple"}), "search")
        await gateway.fetch_endpoint(gateway.build_request("/search", {"q": "tesla"}), "search")

        assert recorder.calls == 2
        assert len(gateway.cache) == 2

    @pytest.mark.asyncio
    async def test_missing_key_fails_without_network(self, gateway_factory):
        gateway, recorder = gateway_factory(ok_handler, api_key="")

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(gateway.build_request("/anything"), "anything")

        assert exc_info.value.kind is ErrorKind.KEY_MISSING
        assert exc_info.value.provider == "test_provider"
        assert recorder.calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code,kind",
        [
            (401, ErrorKind.KEY_INVALID),
            (403, ErrorKind.KEY_INVALID),
            (429, ErrorKind.RATE_LIMITED),
            (400, ErrorKind.BAD_PARAMETERS),
            (500, ErrorKind.SERVICE_UNAVAILABLE),
            (502, ErrorKind.SERVICE_UNAVAILABLE),
            (503, ErrorKind.SERVICE_UNAVAILABLE),
            (418, ErrorKind.UNKNOWN),
        ],
    )
    async def test_http_failures_are_classified_and_not_cached(self, gateway_factory, status_code, kind):
        gateway, recorder = gateway_factory(status_handler(status_code))
        request = gateway.build_request("/failing")

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(request, "failing endpoint")

        assert exc_info.value.kind is kind
        assert exc_info.value.upstream_status == status_code
        assert len(gateway.cache) == 0

        # no error entry was cached, so the next call goes out again
        with pytest.raises(ClassifiedError):
            await gateway.fetch_endpoint(request, "failing endpoint")
        assert recorder.calls == 2

    @pytest.mark.asyncio
    async def test_provider_status_overrides(self, gateway_factory):
        gateway, _ = gateway_factory(
            status_handler(404),
            status_overrides={404: ErrorKind.BAD_PARAMETERS},
        )

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(gateway.build_request("/v3/reference/tickers/NOPE"), "company details")

        assert exc_info.value.kind is ErrorKind.BAD_PARAMETERS

    @pytest.mark.asyncio
    async def test_connection_failure_is_network_error(self, gateway_factory):
        def handler(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        gateway, recorder = gateway_factory(handler)

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(gateway.build_request("/anything"), "anything")

        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR
        assert recorder.calls == 1
        assert len(gateway.cache) == 0

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self, gateway_factory):
        def handler(request):
            raise httpx.ReadTimeout("upstream hung", request=request)

        gateway, _ = gateway_factory(handler)

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(gateway.build_request("/slow"), "slow endpoint")

        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_per_call_timeout_is_applied(self, gateway_factory):
        gateway, recorder = gateway_factory(ok_handler)

        await gateway.fetch_endpoint(gateway.build_request("/a"), "a")
        await gateway.fetch_endpoint(gateway.build_request("/b"), "b", timeout=2.5)

        assert recorder.requests[0].extensions["timeout"]["read"] == 10.0
        assert recorder.requests[1].extensions["timeout"]["read"] == 2.5

    @pytest.mark.asyncio
    async def test_non_json_body_is_unknown(self, gateway_factory):
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        gateway, _ = gateway_factory(handler)

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(gateway.build_request("/page"), "page")

        assert exc_info.value.kind is ErrorKind.UNKNOWN
        assert len(gateway.cache) == 0

    @pytest.mark.asyncio
    async def test_embedded_error_in_success_body(self, gateway_factory):
        def detect(payload):
            if payload.get("status") == "error":
                return ErrorKind.UNKNOWN, payload.get("message", "error")
            return None

        def handler(request):
            return httpx.Response(200, json={"status": "error", "message": "quota reached"})

        gateway, _ = gateway_factory(handler, embedded_error=detect)

        with pytest.raises(ClassifiedError) as exc_info:
            await gateway.fetch_endpoint(gateway.build_request("/everything"), "news")

        assert exc_info.value.kind is ErrorKind.UNKNOWN
        assert exc_info.value.message == "quota reached"
        assert len(gateway.cache) == 0

    @pytest.mark.asyncio
    async def test_post_requests_bypass_cache(self, gateway_factory):
        gateway, recorder = gateway_factory(ok_handler)
        request = gateway.build_request("/chat", method="POST", json_body={"prompt": "hi"})

        await gateway.fetch_endpoint(request, "chat")
        await gateway.fetch_endpoint(request, "chat")

        assert recorder.calls == 2
        assert len(gateway.cache) == 0
        assert recorder.requests[0].method == "POST"
        assert json.loads(recorder.requests[0].read()) == {"prompt": "hi"}


class TestBuildRequest:
    def test_header_bearer(self, gateway_factory):
        gateway, _ = gateway_factory(ok_handler, auth_style=AuthStyle.HEADER_BEARER)

        request = gateway.build_request("/chat/completions")

        assert request.headers["Authorization"] == "Bearer secret-key"
        assert "secret-key" not in request.url

    def test_query_param(self, gateway_factory):
        gateway, _ = gateway_factory(ok_handler, auth_style=AuthStyle.QUERY_PARAM, auth_param="apiKey")

        request = gateway.build_request("/v2/aggs/ticker/AAPL/prev", {"adjusted": "true"})

        url = httpx.URL(request.url)
        assert url.path == "/v2/aggs/ticker/AAPL/prev"
        assert url.params["apiKey"] == "secret-key"
        assert url.params["adjusted"] == "true"
        assert "Authorization" not in request.headers
        assert request.cache_key == request.url

    def test_header_custom_key(self, gateway_factory):
        gateway, _ = gateway_factory(ok_handler, auth_style=AuthStyle.HEADER_CUSTOM_KEY, auth_param="X-Api-Key")

        request = gateway.build_request("/everything", {"q": "tech"})

        assert request.headers["X-Api-Key"] == "secret-key"
        assert httpx.URL(request.url).params["q"] == "tech"

    def test_none_params_are_dropped(self, gateway_factory):
        gateway, _ = gateway_factory(ok_handler)

        request = gateway.build_request("/search", {"q": "x", "page": None})

        assert "page" not in httpx.URL(request.url).params

    def test_base_url_join(self, gateway_factory):
        gateway, _ = gateway_factory(ok_handler, base_url="https://newsapi.example/v2/")

        request = gateway.build_request("everything")

        assert request.url.startswith("https://newsapi.example/v2/everything")


class TestGatewayMetrics:
    @pytest.mark.asyncio
    async def test_outcomes_and_cache_counters(self, provider_factory, recorder_factory, fake_clock):
        registry = CollectorRegistry()
        metrics = MetricsCollector("gateway", registry=registry)
        recorder = recorder_factory(ok_handler)
        gateway = ProviderGateway(
            provider_factory(),
            transport=recorder.transport,
            metrics=metrics,
            clock=fake_clock,
        )

        request = gateway.build_request("/quote")
        await gateway.fetch_endpoint(request, "quote")
        await gateway.fetch_endpoint(request, "quote")

        labels = {"provider": "test_provider"}
        assert registry.get_sample_value("provider_cache_misses_total", labels) == 1.0
        assert registry.get_sample_value("provider_cache_hits_total", labels) == 1.0
        assert registry.get_sample_value(
            "provider_requests_total", {"provider": "test_provider", "outcome": "ok"}
        ) == 1.0

    @pytest.mark.asyncio
    async def test_failures_counted_by_kind(self, provider_factory, recorder_factory, fake_clock):
        registry = CollectorRegistry()
        recorder = recorder_factory(status_handler(429))
        gateway = ProviderGateway(
            provider_factory(),
            transport=recorder.transport,
            metrics=MetricsCollector("gateway", registry=registry),
            clock=fake_clock,
        )

        with pytest.raises(ClassifiedError):
            await gateway.fetch_endpoint(gateway.build_request("/quote"), "quote")

        assert registry.get_sample_value(
            "provider_requests_total", {"provider": "test_provider", "outcome": "rate_limited"}
        ) == 1.0
