"""Credential sources for the issue tracker client."""

from typing import Protocol, runtime_checkable

from src.settings import AppSettings, get_settings


@runtime_checkable
class CredentialProvider(Protocol):
    """Anything that can hand the client an auth token.

    Returning None or an empty string means no credential is available.
    """

    def get_token(self) -> str | None:
        """Return the auth token."""
        ...


class EnvironmentCredentialProvider:
    """Reads the token from the ``AUTH_TOKEN`` environment variable.

    Settings are loaded when the token is requested, not when the provider
    is created, so the environment at client construction time wins.
    """

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings

    def get_token(self) -> str | None:
        settings = self._settings or get_settings()
        return settings.auth_token


class StaticCredentialProvider:
    """Provides a fixed token."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token
