"""Configuration model for the issue tracker client."""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.fetch.constants import DEFAULT_TIMEOUT_SECONDS
from src.tracker.constants import API_PATH, CACHE_SUBDIRECTORY, DEFAULT_HOST


class TrackerConfig(BaseModel):
    """Configuration for :class:`~src.tracker.client.IssueTrackerClient`.

    Immutable once built. ``repository`` is the default repository for
    callers that do not pass one explicitly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    repository: Annotated[
        str, Field(min_length=1, description="Repository path, e.g. group/project")
    ]
    root_path: Path = Field(description="Root the cache directory is relative to")
    cache_dir: str | None = Field(
        default=None, description="Cache directory relative to root_path"
    )
    host: str = Field(default=DEFAULT_HOST, description="Tracker base URL")
    timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"host must be an http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @property
    def api_base_url(self) -> str:
        """Base URL of the REST API."""
        return f"{self.host}{API_PATH}"

    @property
    def cache_location(self) -> Path | None:
        """Directory for cached responses, or None when caching is off."""
        if not self.cache_dir:
            return None
        return Path(self.root_path, self.cache_dir, CACHE_SUBDIRECTORY)
