"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the analysis services and
the command line scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class GeminiSettings(BaseSettings):
    """Configuration for Gemini model access."""

    model_config = SettingsConfigDict(populate_by_name=True)

    api_key: str = Field(..., validation_alias="GEMINI_API_KEY")
    fast_model_name: str = Field(
        "gemini-2.0-flash", validation_alias="GEMINI_FAST_MODEL"
    )
    fast_display_name: str = Field(
        "Gemini 2.0 Flash", validation_alias="GEMINI_FAST_DISPLAY_NAME"
    )
    quality_model_name: str = Field(
        "gemini-2.5-pro-preview-03-25", validation_alias="GEMINI_QUALITY_MODEL"
    )
    quality_display_name: str = Field(
        "Gemini 2.5 Pro", validation_alias="GEMINI_QUALITY_DISPLAY_NAME"
    )
    default_model: str = Field(
        "quality",
        validation_alias="GEMINI_DEFAULT_MODEL",
        description="Model tier used when a request does not name one.",
    )


class RetrySettings(BaseSettings):
    """Backoff policy applied around model invocations."""

    model_config = SettingsConfigDict(populate_by_name=True)

    max_attempts: int = Field(5, ge=1, validation_alias="RETRY_MAX_ATTEMPTS")
    base_delay_seconds: float = Field(
        1.0, ge=0, validation_alias="RETRY_BASE_DELAY_SECONDS"
    )
    max_delay_seconds: float = Field(
        30.0, ge=0, validation_alias="RETRY_MAX_DELAY_SECONDS"
    )


class GoogleSettings(BaseSettings):
    """Configuration required for verifying Google Sign-In ID tokens."""

    model_config = SettingsConfigDict(populate_by_name=True)

    client_id: str = Field(..., validation_alias="GOOGLE_CLIENT_ID")


class SessionSettings(BaseSettings):
    """Cookie session configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    secret: str = Field(
        "change-me-session-secret",
        validation_alias="SESSION_SECRET",
        description="Key used to sign the session cookie. Override in production.",
    )
    max_age_seconds: int = Field(
        7 * 24 * 60 * 60,
        validation_alias="SESSION_MAX_AGE",
    )
    https_only: bool = Field(False, validation_alias="SESSION_HTTPS_ONLY")


class StorageSettings(BaseSettings):
    """Location of the history document store."""

    model_config = SettingsConfigDict(populate_by_name=True)

    history_db_path: str = Field(
        "data/history.db", validation_alias="HISTORY_DB_PATH"
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    cors_allow_origins: str = Field(
        "*",
        validation_alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of origins allowed to call the API.",
    )
    max_upload_bytes: int = Field(
        10 * 1024 * 1024, validation_alias="MAX_UPLOAD_BYTES"
    )
    help_history_limit: int = Field(
        20,
        ge=0,
        validation_alias="HELP_HISTORY_LIMIT",
        description="Number of prior chat messages forwarded to the help prompt.",
    )
    history_fetch_timeout: float = Field(
        15.0, validation_alias="HISTORY_FETCH_TIMEOUT"
    )
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @property
    def cors_origins(self) -> tuple[str, ...]:
        """Support providing origins as a comma-separated string."""
        return tuple(
            origin.strip()
            for origin in self.cors_allow_origins.split(",")
            if origin.strip()
        )


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GeminiSettings",
    "GoogleSettings",
    "RetrySettings",
    "SessionSettings",
    "StorageSettings",
    "get_settings",
]
