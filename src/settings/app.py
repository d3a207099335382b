"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    auth_token: str | None = Field(default=None, validation_alias="AUTH_TOKEN")
    tracker_host: str | None = Field(default=None, validation_alias="TRACKER_HOST")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
