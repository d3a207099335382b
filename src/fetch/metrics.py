"""Metrics collection for the HTTP fetch layer."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class FetchMetrics:
    """Metrics for HTTP fetch operations.

    Singleton class that tracks request counts by status, cache hits,
    bytes received and time spent waiting on the remote.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_cache_hits_total: int = 0
    http_cache_stores_total: int = 0
    http_bytes_total: int = 0
    http_duration_ms_total: float = 0.0
    http_request_count: int = 0

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, status_code: int, bytes_received: int) -> None:
        """Record a completed HTTP request.

        Args:
            status_code: HTTP status code.
            bytes_received: Number of bytes received.
        """
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )
        self.http_bytes_total += bytes_received
        self.http_request_count += 1

    def record_cache_hit(self) -> None:
        """Record a response served from cache after a 304."""
        self.http_cache_hits_total += 1

    def record_cache_store(self) -> None:
        """Record a response written to the cache."""
        self.http_cache_stores_total += 1

    def record_duration(self, duration_ms: float) -> None:
        """Record request duration."""
        self.http_duration_ms_total += duration_ms

    def to_dict(self) -> dict[str, object]:
        """Export metrics as a plain dictionary."""
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_cache_hits_total": self.http_cache_hits_total,
            "http_cache_stores_total": self.http_cache_stores_total,
            "http_bytes_total": self.http_bytes_total,
            "http_duration_ms_total": round(self.http_duration_ms_total, 2),
            "http_request_count": self.http_request_count,
        }
