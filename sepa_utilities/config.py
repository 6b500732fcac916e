"""
Service Configuration

Settings are read from environment variables prefixed with SEPA_
(e.g. SEPA_LOG_LEVEL=DEBUG) or from a .env file in the working directory.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    app_name: str = "SEPA Utilities"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # --- Validation defaults ---
    # Schema version (id or name) used when a request does not name one
    default_version: Optional[str] = None
    default_sanitize_flags: int = 0

    # --- Calendar ---
    max_workday_offset: int = 365

    # --- HTTP ---
    cors_origins: list[str] = ["*"]

    class Config:
        env_prefix = "SEPA_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
