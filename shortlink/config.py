"""Configuration management for the shortlink service.

This module provides centralized configuration using Pydantic BaseSettings
with environment variable and ``.env`` support, cached after first access.

How to Use
===========
**Step 1 — Import**::
    from shortlink.config import get_settings

**Step 2 — Read values**::
    settings = get_settings()
    print(settings.BASE_URL, settings.SLUG_LENGTH)

Key Behaviours
===============
- Settings are cached after first access (``lru_cache``).
- Environment variables override defaults automatically.
- ``get_settings.cache_clear()`` forces a reload (tests use this).

Classes:
    Settings:  Pydantic model for all configuration values.
"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "shortlink"
    APP_ENV: str = "development"
    BASE_URL: str = "http://localhost:3006"
    PORT: int = 3006
    LOG_LEVEL: str = "INFO"

    # SQLite by default; any SQLAlchemy async URL works
    DATABASE_URL: str = "sqlite+aiosqlite:///data/urls.sqlite"

    # Slug allocation
    SLUG_LENGTH: int = 6
    SLUG_MAX_ATTEMPTS: int = 5

    # Click increment worker pool
    CLICK_QUEUE_SIZE: int = 1000
    CLICK_WORKERS: int = 2
    CLICK_DRAIN_TIMEOUT_SECONDS: float = 5.0

    # Frontend build output
    STATIC_DIR: str = "dist"

    # Discord OAuth
    DISCORD_CLIENT_ID: str = ""
    DISCORD_CLIENT_SECRET: str = ""
    DISCORD_REDIRECT_URI: str = ""

    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
