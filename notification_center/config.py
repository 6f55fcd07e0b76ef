"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./notifications.db",
        description="Async SQLAlchemy URL of the store holding the email_notifications table",
        min_length=1,
    )
    legacy_database_url: str | None = Field(
        default=None,
        description=(
            "Async SQLAlchemy URL of the store holding the legacy notifications table. "
            "Defaults to DATABASE_URL when unset"
        ),
    )
    sendpulse_client_id: str | None = Field(
        default=None,
        description="OAuth client id used to obtain SendPulse access tokens",
    )
    sendpulse_client_secret: str | None = Field(
        default=None,
        description="OAuth client secret used to obtain SendPulse access tokens",
    )
    sendpulse_api_base_url: str = Field(
        default="https://api.sendpulse.com",
        description="Base URL of the SendPulse REST API",
    )
    sender_email: str = Field(
        default="notifications@example.com",
        description="Email address that will appear as the sender of notifications",
        min_length=3,
    )
    sender_name: str = Field(
        default="Store Notifications",
        description="Display name used as the sender of notifications",
    )
    reply_to_email: str | None = Field(
        default=None,
        description="Reply-To address. Falls back to the sender address",
    )
    transport_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound in seconds for a single transport send",
        gt=0,
    )
    transport_max_retries: int = Field(
        default=3,
        description="Retries performed on network errors before a send is considered failed",
        ge=0,
    )
    transport_retry_initial_delay: float = Field(
        default=1.0,
        description="Initial backoff delay in seconds between transport retries",
        ge=0,
    )
    transport_retry_max_delay: float = Field(
        default=10.0,
        description="Maximum backoff delay in seconds between transport retries",
        ge=0,
    )
    token_refresh_ratio: float = Field(
        default=0.9,
        description="Fraction of the access token lifetime after which it is refreshed",
        gt=0,
        le=1,
    )
    throttle_window_days: int = Field(
        default=7,
        description="Days during which a recipient may receive a single manual email",
        gt=0,
    )
    fanout_concurrency: int = Field(
        default=10,
        description="Maximum number of admin broadcast legs running at the same time",
        gt=0,
    )
    bulk_max_batch: int = Field(
        default=100,
        description="Maximum number of ids accepted by bulk operations",
        gt=0,
    )
    app_timezone: str = Field(
        default="Africa/Dar_es_Salaam",
        description="IANA timezone name or UTC offset used for stored timestamps",
    )
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_sendpulse_pair(self) -> "Settings":
        if bool(self.sendpulse_client_id) ^ bool(self.sendpulse_client_secret):
            raise ValueError(
                "SENDPULSE_CLIENT_ID and SENDPULSE_CLIENT_SECRET must both be provided to enable email"
            )
        if "@" not in self.sender_email:
            raise ValueError("SENDER_EMAIL must be a valid email address")
        if self.reply_to_email and "@" not in self.reply_to_email:
            raise ValueError("REPLY_TO_EMAIL must be a valid email address")
        return self

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendpulse_client_id and self.sendpulse_client_secret)

    @property
    def resolved_legacy_database_url(self) -> str:
        return self.legacy_database_url or self.database_url


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()
    from notification_center.utils.datetime import get_app_timezone

    get_app_timezone.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
