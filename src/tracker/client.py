"""Issue tracker client.

Queries a GitLab-shaped REST API for issues and users and returns records
in the normalized schema defined in :mod:`src.tracker.models`.

API documentation: https://docs.gitlab.com/ee/api/issues.html
"""

from pathlib import Path
from typing import Any

import httpx
import structlog

from src.fetch.cache import FileResponseCache, ResponseCache
from src.fetch.client import HttpFetcher
from src.tracker.config import TrackerConfig
from src.tracker.constants import (
    AUTH_HEADER,
    AUTH_SCHEME,
    AUTH_TOKEN_ENV_VAR,
    COMPONENT_TRACKER,
    ISSUE_PATH_TEMPLATE,
    USERS_PATH,
)
from src.tracker.credentials import CredentialProvider, EnvironmentCredentialProvider
from src.tracker.errors import ConfigurationError, FetchFailedError, TrackerError
from src.tracker.models import NormalizedIssue, NormalizedUser
from src.tracker.normalize import (
    build_issue_url_prefix,
    encode_login,
    encode_project_path,
    normalize_issue,
    normalize_user,
)


logger = structlog.get_logger()


class IssueTrackerClient:
    """Authenticated, optionally cached, read-only tracker client.

    Holds only immutable state after construction, so one instance can
    serve concurrent calls. Each operation makes at most one request and
    never retries.

    Example:
        >>> client = IssueTrackerClient(
        ...     TrackerConfig(repository="group/project", root_path=Path.cwd()),
        ...     credentials=StaticCredentialProvider("glpat-..."),
        ... )
        >>> issue = await client.get_issue_data("group/project", 42)
    """

    def __init__(
        self,
        config: TrackerConfig,
        credentials: CredentialProvider | None = None,
        cache: ResponseCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Tracker configuration.
            credentials: Token source. Defaults to the ``AUTH_TOKEN``
                environment variable.
            cache: Response cache. Defaults to a file cache under
                ``config.cache_location`` when a cache directory is set.
            transport: Optional httpx transport for the underlying fetcher.

        Raises:
            ConfigurationError: If no credential is available.
        """
        self._config = config
        self._cache_location = config.cache_location

        provider = credentials or EnvironmentCredentialProvider()
        token = provider.get_token()
        if not token:
            msg = f"Must provide {AUTH_TOKEN_ENV_VAR}"
            raise ConfigurationError(msg, details={"env_var": AUTH_TOKEN_ENV_VAR})
        self._auth = token

        if cache is None and self._cache_location is not None:
            cache = FileResponseCache(self._cache_location)

        self._fetcher = HttpFetcher(
            cache=cache,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )
        self._log = logger.bind(
            component=COMPONENT_TRACKER,
            host=config.host,
        )
        self._log.debug(
            "tracker_client_ready",
            repository=config.repository,
            cache_location=str(self._cache_location) if self._cache_location else None,
            caching_enabled=self._fetcher.caching_enabled,
        )

    @property
    def config(self) -> TrackerConfig:
        """Tracker configuration."""
        return self._config

    @property
    def cache_location(self) -> Path | None:
        """Directory for cached responses, or None when caching is off."""
        return self._cache_location

    def get_issue_url_prefix(self, repository: str | None = None) -> str:
        """Get the web URL prefix for issues of a repository.

        Args:
            repository: Repository path. Defaults to the configured one.

        Returns:
            URL ending in ``/-/issues/``.
        """
        return build_issue_url_prefix(
            self._config.host, repository or self._config.repository
        )

    async def get_issue_data(
        self, repository: str, issue_number: int | str
    ) -> NormalizedIssue:
        """Fetch and normalize an issue.

        Args:
            repository: Repository path, e.g. ``group/project``.
            issue_number: Project-scoped issue number.

        Returns:
            The normalized issue.

        Raises:
            FetchFailedError: If the remote answers with a non-success status.
            MalformedResponseError: If the issue is missing expected fields.
        """
        path = ISSUE_PATH_TEMPLATE.format(
            project=encode_project_path(repository),
            issue=issue_number,
        )
        url = f"{self._config.api_base_url}{path}"

        payload = await self._fetch(url)
        try:
            issue = normalize_issue(payload, url)
        except TrackerError as e:
            self._log.warning("issue_malformed", **e.to_dict())
            raise

        self._log.info(
            "issue_fetched",
            repository=repository,
            numeric_id=issue.numeric_id,
            labels=len(issue.labels),
        )
        return issue

    async def get_user_data(self, login: str) -> NormalizedUser:
        """Fetch and normalize a user by login handle.

        Unknown logins are not an error: a fallback record built from the
        login itself is returned instead.

        Args:
            login: Login handle to look up.

        Returns:
            The normalized user.

        Raises:
            FetchFailedError: If the remote answers with a non-success status.
            MalformedResponseError: If the lookup result has the wrong shape.
        """
        url = f"{self._config.api_base_url}{USERS_PATH}?username={encode_login(login)}"

        payload = await self._fetch(url)
        try:
            user = normalize_user(payload, login, self._config.host, url)
        except TrackerError as e:
            self._log.warning("user_malformed", **e.to_dict())
            raise

        if isinstance(payload, list) and not payload:
            self._log.info("user_fallback", login=login)
        else:
            self._log.info("user_fetched", login=user.login_handle)
        return user

    async def _fetch(self, url: str) -> Any:
        """Perform an authenticated GET and return the parsed JSON body.

        The body is parsed whatever the status; a body that is not JSON
        raises json.JSONDecodeError. An empty non-success body is reported
        as null.

        Raises:
            FetchFailedError: If the status is not 2xx.
        """
        result = await self._fetcher.fetch(
            url,
            extra_headers={AUTH_HEADER: f"{AUTH_SCHEME} {self._auth}"},
        )
        # An unserved 304 or a bare error status carries no body
        body = result.json_body() if result.body_bytes or result.is_success else None

        if result.is_success:
            return body

        error = FetchFailedError(
            url=url,
            status_code=result.status_code,
            status_text=result.reason_phrase,
            body=body,
        )
        self._log.warning(
            "tracker_fetch_failed",
            status_code=result.status_code,
            status_text=result.reason_phrase,
        )
        raise error
