"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_to_reader.constants import (
    BROWSER_PAGE_LOAD_TIMEOUT_SECONDS,
    DEFAULT_FETCH_CONCURRENCY,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MAX_HTML_ERRORS,
    SMTP_HOST,
    SMTP_PORT,
    SMTP_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        env_prefix="CTR_",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["local", "ci", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Console log level")

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token (events stay local without it)"
    )

    # ==========================================================================
    # Fetching
    # ==========================================================================

    fetch_concurrency: int = Field(
        default=DEFAULT_FETCH_CONCURRENCY,
        ge=1,
        description="Maximum number of concurrent browser navigations",
    )
    browser_page_load_timeout_seconds: float = Field(
        default=BROWSER_PAGE_LOAD_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for a single browser navigation (seconds)",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for plain HTTP fallback requests (seconds)",
    )
    redirect_triggers_fallback: bool = Field(
        default=True,
        description=(
            "Treat a redirected navigation as a bot-verification page and "
            "refetch it with plain HTTP"
        ),
    )

    # ==========================================================================
    # HTML validation
    # ==========================================================================

    max_html_errors: int = Field(
        default=DEFAULT_MAX_HTML_ERRORS,
        ge=0,
        description="Structural parse errors tolerated before HTML counts as invalid",
    )

    # ==========================================================================
    # Device delivery
    # ==========================================================================

    smtp_host: str = Field(default=SMTP_HOST, description="SMTP server (SSL)")
    smtp_port: int = Field(default=SMTP_PORT, description="SMTP SSL port")
    smtp_timeout_seconds: float = Field(
        default=SMTP_TIMEOUT_SECONDS, gt=0, description="SMTP socket timeout"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
