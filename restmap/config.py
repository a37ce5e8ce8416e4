"""Application Configuration — environment settings plus validated construction options.

Invariants:
    - Secrets come from environment variables or explicit options (never hardcoded in apps)
    - get_settings() is cached (lru_cache) — single instance per process
    - Construction options validated once by ApplicationConfig; exemption patterns
      are compiled regular expressions after validation

Design Decisions:
    - pydantic-settings for process environment, plain pydantic models for the
      per-Application options (controllers, database, authentication, app)
    - Defaults provided for all non-secret settings: works out of the box on SQLite
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.ext.asyncio import AsyncEngine


class Settings(BaseSettings):
    """Process settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./restmap.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = []

    # Authentication
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# ─── Construction Options ───────────────────────────────────────

class ControllersConfig(BaseModel):
    """Where controller classes come from."""
    dir: Path | None = None
    classes: list[type[Any]] = Field(default_factory=list)


class ModelsConfig(BaseModel):
    """Where persistence models come from."""
    dir: Path | None = None
    classes: list[type[Any]] = Field(default_factory=list)


class DatabaseConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    connection: AsyncEngine | str | None = None
    models: ModelsConfig = Field(default_factory=ModelsConfig)


class AuthenticationConfig(BaseModel):
    """Bearer-token gate; paths matching `unauthenticated` skip it."""
    unauthenticated: list[re.Pattern] = Field(default_factory=list)
    secret: str | None = None
    algorithms: list[str] | None = None


class ApplicationConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    controllers: ControllersConfig = Field(default_factory=ControllersConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    authentication: AuthenticationConfig | None = None
    app: FastAPI | None = None
    port: int | None = None
