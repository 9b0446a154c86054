"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables (prefix ``SHOPSEARCH_``) and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Storefront backends
    api_base_url: str = "http://localhost:3001/api/v1"
    account_api_base_url: str = "http://localhost:5001/api"
    auth_token: str | None = None
    request_timeout: float = 10.0
    retry_attempts: int = Field(default=3, ge=1)

    # Query orchestration
    debounce_ms: int = Field(default=100, ge=0)
    local_candidate_limit: int = Field(default=40, ge=1)
    local_min_score: int = 10
    synonyms: dict[str, list[str]] | None = None  # None -> built-in map

    # Suggestions
    suggestion_limit: int = Field(default=6, ge=0)
    trending_limit: int = Field(default=20, ge=0)
    featured_limit: int = 8
    bestseller_limit: int = 8

    # Recent searches (client-side storage)
    storage_path: Path = Path("data/storage.json")
    recent_searches_key: str = "recentSearches"
    recent_searches_max: int = Field(default=8, ge=1)
    recent_persist_delay_ms: int = Field(default=400, ge=0)

    # Logging / API
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="SHOPSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
