"""Read-only adapter for a GitLab-shaped issue tracker API.

Fetches issues and users with token authentication and an optional
response cache, and returns them in a stable normalized schema.
"""

from src.tracker.client import IssueTrackerClient
from src.tracker.config import TrackerConfig
from src.tracker.credentials import (
    CredentialProvider,
    EnvironmentCredentialProvider,
    StaticCredentialProvider,
)
from src.tracker.errors import (
    ConfigurationError,
    FetchFailedError,
    MalformedResponseError,
    TrackerError,
    TrackerErrorClass,
)
from src.tracker.models import (
    IssueAuthor,
    IssueLabel,
    NormalizedIssue,
    NormalizedUser,
)


__all__ = [
    # Client
    "IssueTrackerClient",
    "TrackerConfig",
    # Credentials
    "CredentialProvider",
    "EnvironmentCredentialProvider",
    "StaticCredentialProvider",
    # Errors
    "ConfigurationError",
    "FetchFailedError",
    "MalformedResponseError",
    "TrackerError",
    "TrackerErrorClass",
    # Models
    "IssueAuthor",
    "IssueLabel",
    "NormalizedIssue",
    "NormalizedUser",
]
