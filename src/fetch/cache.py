"""Response caching for HTTP fetch operations.

A cache is any object implementing :class:`ResponseCache`. Two backends are
provided: an in-memory dictionary (deterministic, used in tests) and a
directory of JSON files (used when a cache directory is configured).
:class:`CacheManager` turns a cache into conditional requests
(ETag/Last-Modified) and serves cached bodies on 304 Not Modified.
"""

import hashlib
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import ValidationError

from src.fetch.constants import CACHE_FILE_SUFFIX, HTTP_STATUS_NOT_MODIFIED
from src.fetch.metrics import FetchMetrics
from src.fetch.models import CachedResponse, FetchResult


logger = structlog.get_logger()


class ResponseCache(Protocol):
    """Protocol for response storage.

    Abstracts the storage layer so callers can substitute an in-memory
    fake for the filesystem.
    """

    def get(self, key: str) -> CachedResponse | None:
        """Retrieve the cached response for a key.

        Args:
            key: Request identity (the URL).

        Returns:
            Cached entry if present, None otherwise.
        """
        ...

    def put(self, key: str, entry: CachedResponse) -> None:
        """Store a response for a key.

        Args:
            key: Request identity (the URL).
            entry: Response to store.
        """
        ...


class InMemoryResponseCache:
    """Dictionary-backed cache. Not shared between processes."""

    def __init__(self) -> None:
        self._entries: dict[str, CachedResponse] = {}

    def get(self, key: str) -> CachedResponse | None:
        return self._entries.get(key)

    def put(self, key: str, entry: CachedResponse) -> None:
        self._entries[key] = entry

    def __len__(self) -> int:
        return len(self._entries)


class FileResponseCache:
    """Cache storing one JSON file per key under a directory.

    File names are the SHA-256 of the key, so arbitrary URLs map to safe
    names. The directory is created lazily on first write.
    """

    def __init__(self, directory: Path) -> None:
        """Initialize the file cache.

        Args:
            directory: Directory holding cache entries.
        """
        self._directory = Path(directory)
        self._log = logger.bind(component="cache", directory=str(self._directory))

    @property
    def directory(self) -> Path:
        """Directory holding cache entries."""
        return self._directory

    def path_for(self, key: str) -> Path:
        """Get the file path used for a key."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._directory / f"{digest}{CACHE_FILE_SUFFIX}"

    def get(self, key: str) -> CachedResponse | None:
        path = self.path_for(key)
        if not path.is_file():
            return None

        try:
            return CachedResponse.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            self._log.warning("cache_entry_unreadable", path=str(path), error=str(e))
            return None

    def put(self, key: str, entry: CachedResponse) -> None:
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)

        # Readers only ever see complete entries
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(entry.model_dump_json())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class CacheManager:
    """Manages cache operations for conditional requests.

    Encapsulates the logic for:
    - Building conditional request headers (If-None-Match, If-Modified-Since)
    - Serving the cached body when the server answers 304
    - Storing successful responses that carry validators
    """

    def __init__(self, cache: ResponseCache) -> None:
        """Initialize the cache manager.

        Args:
            cache: Storage backend for cache entries.
        """
        self._cache = cache
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="cache")

    def get_conditional_headers(self, key: str) -> dict[str, str]:
        """Get conditional request headers from cached data.

        Args:
            key: Cache key to look up.

        Returns:
            Dictionary with If-None-Match and/or If-Modified-Since headers.
        """
        entry = self._cache.get(key)
        headers: dict[str, str] = {}

        if entry:
            if entry.etag:
                headers["If-None-Match"] = entry.etag
            if entry.last_modified:
                headers["If-Modified-Since"] = entry.last_modified
            self._log.debug(
                "cache_lookup",
                key=key,
                has_etag=entry.etag is not None,
                has_last_modified=entry.last_modified is not None,
            )

        return headers

    def resolve(self, key: str, result: FetchResult) -> FetchResult:
        """Reconcile a fresh result with the cache.

        A 304 is replaced by the cached response. A successful response with
        an ETag or Last-Modified header is stored. Anything else is returned
        untouched.

        Args:
            key: Cache key.
            result: Result received from the server.

        Returns:
            The result the caller should see.
        """
        if result.status_code == HTTP_STATUS_NOT_MODIFIED:
            entry = self._cache.get(key)
            if entry is None:
                self._log.warning("cache_entry_missing_on_304", key=key)
                return result
            self._metrics.record_cache_hit()
            self._log.debug("cache_hit", key=key)
            return FetchResult(
                status_code=entry.status_code,
                reason_phrase=entry.reason_phrase,
                final_url=result.final_url,
                headers=result.headers,
                body_bytes=entry.body.encode("utf-8"),
                cache_hit=True,
            )

        if not result.is_success:
            return result

        entry = CachedResponse(
            url=key,
            status_code=result.status_code,
            reason_phrase=result.reason_phrase,
            etag=result.headers.get("etag") or result.headers.get("ETag"),
            last_modified=result.headers.get("last-modified")
            or result.headers.get("Last-Modified"),
            body=result.body_bytes.decode("utf-8", errors="replace"),
            fetched_at=datetime.now(UTC),
        )
        if entry.has_validators:
            self._cache.put(key, entry)
            self._metrics.record_cache_store()
            self._log.debug(
                "cache_update",
                key=key,
                status_code=result.status_code,
                etag=entry.etag is not None,
                last_modified=entry.last_modified is not None,
            )

        return result
