"""Centralized configuration for todoledger.

Supports environment variable overrides via pydantic-settings. Modules
should import settings from here rather than hardcoding values.

Usage:
    from todoledger.config import get_settings

    settings = get_settings()
    db_path = settings.store.db_path
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreConfig(BaseSettings):
    """List store configuration."""

    model_config = SettingsConfigDict(env_prefix="TODOLEDGER_STORE_")

    db_path: str = Field(default=":memory:", description="SQLite DB path (':memory:' for in-memory)")


class APIConfig(BaseSettings):
    """API service configuration."""

    model_config = SettingsConfigDict(env_prefix="TODOLEDGER_API_")

    host: str = Field(default="127.0.0.1", description="API host address")
    port: int = Field(default=8000, ge=1, le=65535, description="API port")
    event_page_limit: int = Field(
        default=1000, ge=1, description="Max events returned by one /events call"
    )


class Settings(BaseSettings):
    """Root settings class.

    Environment variables:
        TODOLEDGER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Nested config environment variables use prefixes:
        TODOLEDGER_STORE_* - List store
        TODOLEDGER_API_* - API service
    """

    model_config = SettingsConfigDict(
        env_prefix="TODOLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    store: StoreConfig = Field(default_factory=StoreConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once from environment variables and .env file.
    """
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure logging based on settings.

    Args:
        settings: Settings instance, or None to use get_settings().
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
