"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.

Credentials (database URL, email connection string, admin recipients)
are not settings: they are resolved at startup through the layered
secret resolver, which falls back to environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database pool sizing (connection string comes from secrets)
    pool_min_size: int = 2  # Minimum connections in pool
    pool_max_size: int = 10  # Maximum connections in pool

    # Secret providers
    key_vault_url: str | None = None  # e.g. https://supplier-vault.vault.azure.net/

    # Rate limiting
    rate_limit_window_seconds: int = 900  # 15 minute trailing window
    rate_limit_max_requests: int = 5  # Submissions per client per window

    # Validation policy
    require_vat_number: bool = False
    default_phone_region: str = "BE"  # Region for numbers without a + prefix

    # Email delivery
    email_backend: Literal["console", "smtp"] = "console"
    email_sender_address: str = "no-reply@suppliers.local"

    # HTTP
    cors_allow_origin: str = "*"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
