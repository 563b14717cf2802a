"""
External API Gateway: the single chokepoint for outbound provider calls.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import httpx

from shared.errors import ClassifiedError, ErrorKind
from shared.logging import get_logger, redact_url
from shared.metrics import MetricsCollector

from ..caching.response_cache import Clock, ResponseCache
from .classification import classify_status, describe_status
from .providers import AuthStyle, ProviderConfig


DEFAULT_TIMEOUT_SECONDS = 10.0

# Returns (kind, message) when a 2xx body is really an error
EmbeddedErrorHook = Callable[[Any], Optional[Tuple[ErrorKind, str]]]


@dataclass(frozen=True)
class ProviderRequest:
    """A fully resolved outbound request."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict, repr=False)
    json_body: Optional[Any] = field(default=None, repr=False)

    @property
    def cache_key(self) -> str:
        return self.url

    @property
    def cacheable(self) -> bool:
        return self.method == "GET"


class ProviderGateway:
    """Validate, cache, call and classify for one provider.

    Successful GET responses are cached as raw payloads for the provider's
    cache window. Failures are raised as ``ClassifiedError`` and are never
    cached or retried here.
    """

    def __init__(
        self,
        provider: ProviderConfig,
        *,
        cache: Optional[ResponseCache] = None,
        embedded_error: Optional[EmbeddedErrorHook] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        metrics: Optional[MetricsCollector] = None,
        clock: Clock = time.monotonic,
    ):
        self.provider = provider
        self.cache = cache if cache is not None else ResponseCache(provider.cache_duration_seconds, clock=clock)
        self.embedded_error = embedded_error
        self.transport = transport
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger(f"gateway.{provider.provider_name}")

    @property
    def name(self) -> str:
        return self.provider.provider_name

    def build_request(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        method: str = "GET",
        json_body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> ProviderRequest:
        """Resolve ``path`` against the provider base URL and attach credentials."""
        url = httpx.URL(f"{self.provider.base_url.rstrip('/')}/{path.lstrip('/')}")
        query: Dict[str, Any] = {k: v for k, v in (params or {}).items() if v is not None}
        request_headers: Dict[str, str] = {"Accept": "application/json"}
        request_headers.update(headers or {})

        api_key = self.provider.api_key
        if api_key:
            style = self.provider.auth_style
            if style == AuthStyle.QUERY_PARAM:
                query[self.provider.auth_param or "apiKey"] = api_key
            elif style == AuthStyle.HEADER_BEARER:
                request_headers["Authorization"] = f"Bearer {api_key}"
            else:
                request_headers[self.provider.auth_param or "X-Api-Key"] = api_key

        if query:
            url = url.copy_merge_params(query)

        return ProviderRequest(
            method=method.upper(),
            url=str(url),
            headers=request_headers,
            json_body=json_body,
        )

    async def fetch_endpoint(
        self,
        request: ProviderRequest,
        endpoint_label: str,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        """Return the provider's JSON payload for ``request``.

        Raises ``ClassifiedError``. A missing API key is reported before the
        cache is consulted or any I/O happens.
        """
        if not self.provider.has_api_key:
            raise self._fail(
                ErrorKind.KEY_MISSING,
                f"{self.name} API key is not set; configure {self.provider.api_key_env_var}",
                endpoint_label,
            )

        use_cache = request.cacheable and self.cache.enabled
        if use_cache:
            entry = self.cache.lookup(request.cache_key)
            if entry is not None:
                self.logger.info("Using cached provider data", provider=self.name, endpoint=endpoint_label)
                self._count("provider_cache_hits_total", provider=self.name)
                return entry.payload
            self._count("provider_cache_misses_total", provider=self.name)

        self.logger.info(
            "Fetching from provider",
            provider=self.name,
            endpoint=endpoint_label,
            method=request.method,
            url=redact_url(request.url),
        )

        response = await self._send(request, endpoint_label, timeout)

        kind = classify_status(response.status_code, self.provider.status_overrides)
        if kind is not None:
            raise self._fail(
                kind,
                describe_status(kind, response.status_code, endpoint_label),
                endpoint_label,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            raise self._fail(
                ErrorKind.UNKNOWN,
                f"{self.name} returned a non-JSON body for {endpoint_label}",
                endpoint_label,
                status_code=response.status_code,
            )

        if self.embedded_error is not None:
            embedded = self.embedded_error(payload)
            if embedded is not None:
                embedded_kind, message = embedded
                raise self._fail(embedded_kind, message, endpoint_label, status_code=response.status_code)

        if use_cache:
            self.cache.set(request.cache_key, payload)
            self.logger.debug("Cached provider data", provider=self.name, endpoint=endpoint_label)

        self._count("provider_requests_total", provider=self.name, outcome="ok")
        return payload

    async def _send(
        self,
        request: ProviderRequest,
        endpoint_label: str,
        timeout: Optional[float],
    ) -> httpx.Response:
        """Perform the HTTP call, classifying transport failures."""
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=timeout if timeout is not None else self.timeout,
                transport=self.transport,
            ) as client:
                return await client.request(
                    request.method,
                    request.url,
                    headers=dict(request.headers),
                    json=request.json_body,
                )
        except httpx.TransportError as exc:
            raise self._fail(
                ErrorKind.NETWORK_ERROR,
                f"Network error when connecting to {self.name}: {exc.__class__.__name__}",
                endpoint_label,
            ) from exc
        except httpx.RequestError as exc:
            raise self._fail(
                ErrorKind.UNKNOWN,
                f"Error fetching {endpoint_label}: {exc}",
                endpoint_label,
            ) from exc
        finally:
            if self.metrics:
                self.metrics.observe_histogram(
                    "provider_request_duration_seconds",
                    time.perf_counter() - started,
                    provider=self.name,
                )

    def _fail(
        self,
        kind: ErrorKind,
        message: str,
        endpoint_label: str,
        *,
        status_code: Optional[int] = None,
    ) -> ClassifiedError:
        self.logger.warning(
            "Provider request failed",
            provider=self.name,
            endpoint=endpoint_label,
            kind=kind.value,
            status_code=status_code,
            error=message,
        )
        self._count("provider_requests_total", provider=self.name, outcome=kind.value)
        return ClassifiedError(kind, message, provider=self.name, status_code=status_code)

    def _count(self, metric_name: str, **labels):
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)
