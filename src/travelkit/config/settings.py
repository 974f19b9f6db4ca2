# src/travelkit/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables (and a local .env file) with validation.

Files that USE this module:
- travelkit.app (composition root wires everything from settings)
- travelkit.adapters.providers.* (API URLs, keys, credentials and timeouts)
- travelkit.adapters.persistence.* (store and preference file locations)
- travelkit.application.country_coordinator (freshness windows)

Files that this module USES:
- travelkit.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from datetime import timedelta  # Freshness windows as durations
from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from travelkit.shared.validators import (
    validate_api_key,  # Validate API key format
    validate_http_url,  # Validate remote endpoint URLs
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Currency converter API (rate source) ---
    currconv_url: str = Field(
        default="https://free.currconv.com/api/v7/convert", alias="CURRCONV_URL"
    )
    currconv_api_key: str = Field(default="", alias="CURRCONV_API_KEY")

    # --- Sherpa API (visa source) ---
    sherpa_url: str = Field(
        default="https://requirements-api.joinsherpa.com/v2/entry-requirements",
        alias="SHERPA_URL",
    )
    sherpa_username: str = Field(default="", alias="SHERPA_USERNAME")
    sherpa_password: str = Field(default="", alias="SHERPA_PASSWORD")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Freshness windows (in days) ---
    rate_freshness_days: int = Field(default=30, alias="RATE_FRESHNESS_DAYS", ge=1, le=365)
    visa_freshness_days: int = Field(default=1, alias="VISA_FRESHNESS_DAYS", ge=1, le=365)

    # --- Background workers ---
    disk_io_workers: int = Field(default=3, alias="DISK_IO_WORKERS", ge=1, le=16)
    network_io_workers: int = Field(default=4, alias="NETWORK_IO_WORKERS", ge=1, le=32)

    # --- Persistence ---
    country_store_file: Path = Field(
        default=Path("./data/countries.json"), alias="COUNTRY_STORE_FILE"
    )
    preferences_file: Path = Field(
        default=Path("./data/preferences.json"), alias="PREFERENCES_FILE"
    )
    default_origin: str = Field(default="United States", alias="DEFAULT_ORIGIN")

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="TRAVELKIT_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def rate_freshness(self) -> timedelta:
        """Maximum age of a cached exchange rate."""
        return timedelta(days=self.rate_freshness_days)

    @property
    def visa_freshness(self) -> timedelta:
        """Maximum age of cached visa information."""
        return timedelta(days=self.visa_freshness_days)

    @field_validator("currconv_url", "sherpa_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate endpoint URL format."""
        if not validate_http_url(v):
            raise ValueError("Endpoint URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("currconv_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key format (an empty key is allowed until first use)."""
        if v and not validate_api_key(v):
            raise ValueError("Invalid CURRCONV_API_KEY format")
        return v

    @field_validator("default_origin")
    @classmethod
    def validate_origin(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("DEFAULT_ORIGIN must not be empty")
        return v


# Global settings instance
settings = Settings()
