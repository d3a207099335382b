"""Data models for the issue tracker adapter.

Raw models describe the remote JSON as received and are only used while
normalizing. Normalized models are the caller-facing schema. Both accept
extra fields so that attributes the adapter does not remap are carried
through unchanged.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class RawRemoteAuthor(BaseModel):
    """Author object nested in a remote issue."""

    model_config = ConfigDict(extra="allow")

    username: str
    web_url: str


class RawRemotePullRequest(BaseModel):
    """Pull request reference attached to an issue, when present."""

    model_config = ConfigDict(extra="allow")

    html_url: str


class RawRemoteIssue(BaseModel):
    """Issue as returned by ``GET /projects/:id/issues/:iid``."""

    model_config = ConfigDict(extra="allow")

    iid: int
    title: str
    labels: list[str]
    author: RawRemoteAuthor
    pull_request: RawRemotePullRequest | None = None


class RawRemoteUser(BaseModel):
    """User as returned by ``GET /users?username=``."""

    model_config = ConfigDict(extra="allow")

    username: str
    web_url: str
    name: str | None = None


class IssueLabel(BaseModel):
    """Single issue label."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str


class IssueAuthor(BaseModel):
    """Author of an issue."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    login_handle: Annotated[str, Field(min_length=1)]
    profile_url: str


class NormalizedIssue(BaseModel):
    """Issue in the caller-facing schema."""

    model_config = ConfigDict(frozen=True, extra="allow")

    numeric_id: int
    title: str
    pull_request_url: str | None = None
    labels: list[IssueLabel] = Field(default_factory=list)
    author: IssueAuthor


class NormalizedUser(BaseModel):
    """User in the caller-facing schema."""

    model_config = ConfigDict(frozen=True, extra="allow")

    login_handle: Annotated[str, Field(min_length=1)]
    display_name: str
    profile_url: str
