"""Fingerprinter configuration loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with FINGERPRINTER_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="FINGERPRINTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///.fingerprinter/fingerprints.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Live matching
    fetch_timeout: float = 10.0
    fetch_max_retries: int = 0
    retry_backoff_base: float = 1.0
    retry_max_delay: float = 30.0
    user_agent: str = "fingerprinter"
    verify_tls: bool = True
    stop_on_unique_match: bool | None = None

    # Ingestion
    # JSON list in the environment, e.g. FINGERPRINTER_IGNORE_PATTERNS='["*.txt", "readme.html"]'
    ignore_patterns: list[str] = []
    version_index_url: str | None = None
    download_dir: Path = Path(".fingerprinter/downloads")

    # Telemetry
    structured_logging: bool = False

    @field_validator("fetch_max_retries")
    @classmethod
    def non_negative_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("fetch_max_retries must be >= 0")
        return v


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings for database %s", settings.database_url)

    return settings
