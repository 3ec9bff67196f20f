"""Configuration management for Inbox Threads.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INBOX_THREADS_ prefix (e.g., INBOX_THREADS_ARCHIVE_DIR).
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOX_THREADS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Archive Configuration
    archive_dir: Path = Field(
        default=Path("."),
        description="Root directory of the mail archive, one message per file",
    )
    ignored_dirs: list[str] = Field(
        default_factory=lambda: [".git"],
        description="Directory names skipped while walking the archive",
    )

    # Index Configuration
    list_page_size: int = Field(
        default=20,
        ge=1,
        description="Number of thread roots returned by a listing",
    )
    source_timeout: float | None = Field(
        default=None,
        gt=0,
        description=(
            "Seconds allowed for the initial archive scan and for each message "
            "or thread hydration. Unset means no deadline."
        ),
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (forces DEBUG logging)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
