"""Engine configuration using pydantic-settings.

All values are loaded from the environment (prefix JSONMEND_) or a .env file.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Recovery engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JSONMEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Processing tracker
    max_attempts: int = Field(default=2, ge=1, description="Recovery attempts per fingerprint before giving up")
    tracker_max_entries: int = Field(default=100, ge=1, description="Tracked fingerprints kept before LRU eviction")
    tracker_ttl_seconds: float = Field(default=60.0, gt=0, description="Seconds a tracked fingerprint stays valid")

    # Pipeline guard
    max_input_chars: int = Field(
        default=1_000_000,
        ge=1,
        description="Inputs longer than this are rejected without running the pipeline",
    )

    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded lazily on first access.
    """
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the jsonmend logger tree."""
    settings = settings or get_settings()
    logging.getLogger("jsonmend").setLevel(settings.log_level.upper())
