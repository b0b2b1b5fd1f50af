"""
Application configuration using Pydantic Settings.

Configuration values can be set via environment variables (prefixed with
``SLIM_AUTH_``) or a .env file.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Durations are expressed in seconds
DEFAULT_DURATION = 60 * 24 * 60 * 60  # 60 days
DEFAULT_ACTIVE_DURATION = 30 * 24 * 60 * 60  # 30 days
DEFAULT_COOKIE_NAME = "session"


class Settings(BaseSettings):
    """Session settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="SLIM_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cookie signing
    secret: Optional[str] = None
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_name_suffix: Optional[str] = None

    # Cookie lifetime
    duration: int = DEFAULT_DURATION
    active_duration: int = DEFAULT_ACTIVE_DURATION

    # Environment
    is_dev: bool = False
    # Parent domain for subdomain sharing, e.g. ".example.com". Ignored in dev.
    cookie_domain: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    json_logging: bool = True


# Global settings instance
settings = Settings()
