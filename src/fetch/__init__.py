"""HTTP fetch layer with optional conditional-request caching.

This module provides async HTTP GET operations with:
- ETag/Last-Modified conditional requests backed by a pluggable cache
- In-memory and on-disk cache backends
- Header and URL credential redaction for logging
- Metrics collection for observability
"""

from src.fetch.cache import (
    CacheManager,
    FileResponseCache,
    InMemoryResponseCache,
    ResponseCache,
)
from src.fetch.client import HttpFetcher
from src.fetch.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    HTTP_STATUS_NOT_MODIFIED,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import CachedResponse, FetchResult
from src.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    # Client
    "HttpFetcher",
    # Cache
    "CacheManager",
    "FileResponseCache",
    "InMemoryResponseCache",
    "ResponseCache",
    # Models
    "CachedResponse",
    "FetchResult",
    # Constants
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "HTTP_STATUS_NOT_MODIFIED",
    "HTTP_STATUS_OK_MAX",
    "HTTP_STATUS_OK_MIN",
    # Metrics
    "FetchMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
