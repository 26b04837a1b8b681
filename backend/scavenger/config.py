"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every setting is read from SCAVENGER_* environment variables or .env
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults work out of the box: SQLite file store, no namespace, serialized writes
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCAVENGER_", env_file=".env", case_sensitive=False,
    )

    # Store
    store_backend: Literal["memory", "sql"] = "sql"
    store_namespace: str = ""
    serialize_writes: bool = True
    create_schema_on_startup: bool = True

    # Database (sql backend only)
    database_url: str = "sqlite+aiosqlite:///./scavenger.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
