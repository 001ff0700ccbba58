"""
Usage Mirror — Application Configuration

Loads runtime configuration from environment variables (and an optional .env
file) using Pydantic Settings.  Only ambient concerns live here: logging,
the local timezone used for late-night detection, and output defaults.  The
scoring weights and thresholds are fixed algorithmic constants and are kept
on the service classes, not in settings.

A cached ``get_settings()`` helper returns the same validated instance to
every call-site without re-parsing the environment.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Usage Mirror engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Logging
    # ------------------------------------------------------------------ #
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json | console

    # ------------------------------------------------------------------ #
    # Late-night detection
    # ------------------------------------------------------------------ #
    # IANA name, e.g. "Europe/London".  Empty means timestamps are read
    # on their own wall clock.
    LOCAL_TIMEZONE: str = ""

    # ------------------------------------------------------------------ #
    # Output defaults
    # ------------------------------------------------------------------ #
    DEFAULT_COMPARISON_DAYS: int = 7
    TOP_APPS_LIMIT: int = 5

    @field_validator("DEFAULT_COMPARISON_DAYS", "TOP_APPS_LIMIT")
    @classmethod
    def _must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be at least 1, got {v}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def _known_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError(f"LOG_FORMAT must be 'json' or 'console', got {v!r}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Import this function anywhere you need access to configuration::

        from usage_mirror.config import get_settings
        settings = get_settings()
    """
    return Settings()
