"""Pipeline configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    # Text extraction
    EXTRACTION_BACKEND: Literal["pypdf", "unstructured"] = "pypdf"
    PYPDF_LAYOUT_MODE: bool = True  # keeps column spacing in extracted lines
    UNSTRUCTURED_STRATEGY: str = "fast"

    # Dialect parsing
    HEADER_SCAN_LINES: int = 50
    PERIOD_SCAN_CHARS: int = 10000
    ROW_LOOKAHEAD_LINES: int = 6
    TWO_DIGIT_YEAR_PIVOT: int = 50

    # Batch parsing
    BATCH_MAX_WORKERS: int = 1

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    DEBUG: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
