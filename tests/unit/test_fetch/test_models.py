"""Unit tests for fetch models."""

import json
from datetime import UTC, datetime

import pytest

from src.fetch.models import CachedResponse, FetchResult


class TestFetchResult:
    """Tests for FetchResult."""

    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [(200, True), (201, True), (299, True), (304, False), (404, False), (500, False)],
    )
    def test_is_success(self, status_code: int, expected: bool) -> None:
        """Test that only 2xx counts as success."""
        result = FetchResult(status_code=status_code, final_url="https://x")

        assert result.is_success is expected

    def test_json_body(self) -> None:
        """Test JSON parsing of the body."""
        result = FetchResult(
            status_code=200, final_url="https://x", body_bytes=b'[{"a": 1}]'
        )

        assert result.json_body() == [{"a": 1}]

    def test_json_body_invalid(self) -> None:
        """Test that a non-JSON body raises."""
        result = FetchResult(status_code=200, final_url="https://x", body_bytes=b"<html>")

        with pytest.raises(json.JSONDecodeError):
            result.json_body()

    def test_body_size(self) -> None:
        """Test body_size."""
        result = FetchResult(status_code=200, final_url="https://x", body_bytes=b"{}")

        assert result.body_size == 2

    def test_status_code_bounds(self) -> None:
        """Test that out-of-range status codes are rejected."""
        with pytest.raises(ValueError):
            FetchResult(status_code=99, final_url="https://x")


class TestCachedResponse:
    """Tests for CachedResponse."""

    def _make(self, **overrides: object) -> CachedResponse:
        values: dict[str, object] = {
            "url": "https://x",
            "status_code": 200,
            "body": "{}",
            "fetched_at": datetime(2024, 1, 15, tzinfo=UTC),
        }
        values.update(overrides)
        return CachedResponse.model_validate(values)

    def test_has_validators_with_etag(self) -> None:
        """Test that an ETag makes the entry revalidatable."""
        assert self._make(etag='"a"').has_validators is True

    def test_has_validators_with_last_modified(self) -> None:
        """Test that Last-Modified makes the entry revalidatable."""
        entry = self._make(last_modified="Mon, 15 Jan 2024 10:00:00 GMT")

        assert entry.has_validators is True

    def test_no_validators(self) -> None:
        """Test an entry without validators."""
        assert self._make().has_validators is False

    def test_json_round_trip(self) -> None:
        """Test that entries survive serialization to disk format."""
        entry = self._make(etag='"a"')

        assert CachedResponse.model_validate_json(entry.model_dump_json()) == entry
