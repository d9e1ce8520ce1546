# fran_scrapers/config.py
"""Configuration management for the Frankfurt scrapers."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="FRAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Browser
    headless: bool = True
    wait_timeout_ms: float = Field(0, ge=0, description="0 disables the timeout")

    # Pagination
    next_page_timeout: float = Field(3.0, gt=0, description="Seconds to probe for a next-page button")
    page_size: str = "100"

    # Detail pages
    detail_timeout: float = Field(10.0, gt=0, description="Seconds to wait for the name and master data")

    # Cache
    database_dir: Path = Path("frandb")
    cache_key: Literal["basename", "sha256"] = "basename"

    # Logging
    log_level: str = "WARNING"
    log_json: bool = True

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return value

    @property
    def next_page_timeout_ms(self) -> float:
        return self.next_page_timeout * 1000

    @property
    def detail_timeout_ms(self) -> float:
        return self.detail_timeout * 1000


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
