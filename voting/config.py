"""Voting Service Settings — read from environment variables or a .env file.

Invariants:
    - One Settings instance per process (get_settings is cached)
    - DATABASE_URL in plain postgresql:// form is rewritten for asyncpg
    - Every field has a default: a local SQLite file works with no configuration

Design Decisions:
    - pydantic-settings for typed, validated environment input
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ASYNC_POSTGRES_SCHEME = "postgresql+asyncpg://"


def to_async_url(url: str) -> str:
    """Rewrite a postgresql:// URL to use the asyncpg driver."""
    if url.startswith("postgresql://"):
        return ASYNC_POSTGRES_SCHEME + url[len("postgresql://"):]
    return url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Election store
    database_url: str = "sqlite+aiosqlite:///./voting.db"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)
    database_create_tables: bool = True

    # HTTP
    cors_origins: list[str] = ["http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def _async_driver(cls, v):
        return to_async_url(v) if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    return Settings()
