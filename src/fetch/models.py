"""Data models for the HTTP fetch layer."""

import json
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from src.fetch.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN


class FetchResult(BaseModel):
    """Result of a fetch operation.

    Holds the response as received, or the cached response when the server
    answered 304 Not Modified.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int = Field(ge=100, le=599, description="HTTP status code")
    reason_phrase: str = Field(default="", description="HTTP status text")
    final_url: Annotated[
        str, Field(min_length=1, description="Final URL after redirects")
    ]
    headers: dict[str, str] = Field(
        default_factory=dict, description="Response headers"
    )
    body_bytes: bytes = Field(default=b"", description="Response body")
    cache_hit: bool = Field(
        default=False, description="Whether response was served from cache"
    )

    @property
    def is_success(self) -> bool:
        """Check if the fetch was successful (2xx status)."""
        return HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body_bytes)

    def json_body(self) -> Any:
        """Parse the response body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.body_bytes)


class CachedResponse(BaseModel):
    """Persisted response used to answer conditional requests."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: Annotated[str, Field(min_length=1)]
    status_code: int = Field(ge=100, le=599)
    reason_phrase: str = ""
    etag: str | None = None
    last_modified: str | None = None
    body: str = Field(default="", description="Response body as text")
    fetched_at: datetime

    @property
    def has_validators(self) -> bool:
        """Whether the entry can be revalidated with a conditional request."""
        return self.etag is not None or self.last_modified is not None
