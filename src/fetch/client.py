"""Async HTTP client with optional response caching."""

import time

import httpx
import structlog

from src.fetch.cache import CacheManager, ResponseCache
from src.fetch.constants import (
    DEFAULT_ACCEPT,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import FetchResult
from src.fetch.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()


class HttpFetcher:
    """Async HTTP GET client.

    Issues exactly one request per call: no retries, no backoff. When a
    cache is supplied, requests are made conditional on the cached
    validators and a 304 is answered from the cache. Transport errors
    raised by httpx propagate to the caller.
    """

    def __init__(
        self,
        cache: ResponseCache | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP fetcher.

        Args:
            cache: Optional response cache.
            timeout_seconds: Request timeout.
            user_agent: User-Agent header value.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._cache = CacheManager(cache) if cache is not None else None
        self._timeout = timeout_seconds
        self._user_agent = user_agent
        self._transport = transport
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch")

    @property
    def caching_enabled(self) -> bool:
        """Whether responses are cached."""
        return self._cache is not None

    async def fetch(
        self,
        url: str,
        extra_headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """Fetch a URL.

        Args:
            url: The URL to fetch. Also used as the cache key.
            extra_headers: Additional headers to include.

        Returns:
            FetchResult with status, headers and body. Non-2xx statuses are
            returned, not raised.
        """
        start_time_ns = time.perf_counter_ns()
        headers = self._build_headers(extra_headers)
        if self._cache is not None:
            headers.update(self._cache.get_conditional_headers(url))

        log = self._log.bind(url=redact_url_credentials(url))
        log.debug("fetch_started", headers=redact_headers(headers))

        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.get(url, headers=headers)

        result = FetchResult(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            final_url=str(response.url),
            headers=dict(response.headers),
            body_bytes=response.content,
        )
        self._metrics.record_request(result.status_code, result.body_size)

        if self._cache is not None:
            result = self._cache.resolve(url, result)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(duration_ms)

        log.info(
            "fetch_complete",
            status_code=result.status_code,
            cache_hit=result.cache_hit,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
        )

        return result

    def _build_headers(self, extra_headers: dict[str, str] | None) -> dict[str, str]:
        headers: dict[str, str] = {
            "User-Agent": self._user_agent,
            "Accept": DEFAULT_ACCEPT,
        }
        if extra_headers:
            headers.update(extra_headers)
        return headers
