"""Remapping of remote API payloads into the normalized schema.

Every function here is pure: it takes a parsed JSON body and returns a
normalized record, or raises MalformedResponseError. Fields the adapter
does not remap are carried through on the result as extra attributes.
"""

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from src.tracker.constants import ISSUE_URL_TEMPLATE
from src.tracker.errors import MalformedResponseError
from src.tracker.models import (
    IssueAuthor,
    IssueLabel,
    NormalizedIssue,
    NormalizedUser,
    RawRemoteIssue,
    RawRemoteUser,
)


# Raw keys overwritten by the mapping; everything else passes through
_ISSUE_CONSUMED_KEYS = frozenset({"title", "labels", "author"})
_USER_CONSUMED_KEYS = frozenset({"username", "web_url", "name"})

M = TypeVar("M", bound=BaseModel)


def encode_project_path(repository: str) -> str:
    """Encode a repository path for use as a single URL path segment.

    The API addresses projects by their URL-encoded full path, so
    ``group/project`` becomes ``group%2Fproject``.
    """
    return repository.replace("/", "%2F")


def encode_login(login: str) -> str:
    """Encode a login handle for use in a query string."""
    return quote(login, safe="")


def build_issue_url_prefix(host: str, repository: str) -> str:
    """Build the web URL prefix that issue numbers are appended to."""
    return ISSUE_URL_TEMPLATE.format(host=host, repository=repository)


def build_fallback_user(login: str, host: str) -> NormalizedUser:
    """Synthesize a user record for a login the remote does not know."""
    return NormalizedUser(
        login_handle=login,
        display_name=login,
        profile_url=f"{host}/{login}",
    )


def normalize_issue(payload: Any, url: str) -> NormalizedIssue:
    """Normalize a remote issue.

    Args:
        payload: Parsed JSON body of the issue endpoint.
        url: Requested URL, for error reporting.

    Returns:
        The normalized issue.

    Raises:
        MalformedResponseError: If expected fields are missing or mistyped.
    """
    raw = _validate(RawRemoteIssue, payload, url, "issue")
    return NormalizedIssue(
        **_passthrough(payload, _ISSUE_CONSUMED_KEYS, NormalizedIssue),
        numeric_id=raw.iid,
        title=raw.title,
        pull_request_url=raw.pull_request.html_url if raw.pull_request else None,
        labels=[IssueLabel(name=name) for name in raw.labels],
        author=IssueAuthor(
            login_handle=raw.author.username,
            profile_url=raw.author.web_url,
        ),
    )


def normalize_user(payload: Any, login: str, host: str, url: str) -> NormalizedUser:
    """Normalize the result of a user lookup.

    The lookup returns a list. The first entry is used; an empty list
    yields the fallback record for ``login``.

    Args:
        payload: Parsed JSON body of the users endpoint.
        login: Requested login handle.
        host: Tracker base URL, for the fallback profile URL.
        url: Requested URL, for error reporting.

    Returns:
        The normalized user.

    Raises:
        MalformedResponseError: If the body is not a list or the first
            entry is missing expected fields.
    """
    if not isinstance(payload, list):
        msg = f"Expected a list of users, got {type(payload).__name__}"
        raise MalformedResponseError(msg, url=url)

    if not payload:
        return build_fallback_user(login, host)

    first = payload[0]
    raw = _validate(RawRemoteUser, first, url, "user")
    return NormalizedUser(
        **_passthrough(first, _USER_CONSUMED_KEYS, NormalizedUser),
        login_handle=raw.username,
        display_name=raw.name or raw.username,
        profile_url=raw.web_url,
    )


def _validate(model: type[M], payload: Any, url: str, kind: str) -> M:
    if not isinstance(payload, dict):
        msg = f"Expected a JSON object for {kind}, got {type(payload).__name__}"
        raise MalformedResponseError(msg, url=url)

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(part) for part in first_error["loc"])
        msg = f"Malformed {kind} response: {field}: {first_error['msg']}"
        raise MalformedResponseError(msg, url=url, field=field) from e


def _passthrough(
    payload: dict[str, Any], consumed: frozenset[str], target: type[BaseModel]
) -> dict[str, Any]:
    reserved = consumed | set(target.model_fields)
    return {key: value for key, value in payload.items() if key not in reserved}
