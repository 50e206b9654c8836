from datetime import timedelta
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import (
    to_uppercase,
    to_lowercase,
    normalize_window_overrides,
)


class Settings(BaseSettings):
    """
    Settings for the foundation services, loaded from the environment (or `.env`).
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "social"

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # Full URL wins over the POSTGRES_* parts (e.g. sqlite+aiosqlite:///./social.db)
    DATABASE_URL_OVERRIDE: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path | None = None
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False
    LOG_USE_QUEUE: bool = False
    LOG_QUEUE_MAX_SIZE: int = 10_000
    LOG_QUEUE_BLOCKING: bool = False

    # Validation
    RECENCY_WINDOW_SECONDS: int = 60
    RECENCY_WINDOW_OVERRIDES: dict[str, int] = {}

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        - `DATABASE_URL_OVERRIDE`, when set, is returned untouched.
        - With `TESTING=True` and `TEST_POSTGRES_DB` set, the test database is used.
        - Otherwise the URL points at `POSTGRES_DB`.
        """
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE

        database = self.POSTGRES_DB
        if self.TESTING and self.TEST_POSTGRES_DB:
            database = self.TEST_POSTGRES_DB

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{database}"
        )

    def recency_window_for(self, entity_name: str) -> timedelta:
        """
        Recency window applied to `updated_date` when an entity is modified.

        A per-entity value in RECENCY_WINDOW_OVERRIDES takes precedence over
        RECENCY_WINDOW_SECONDS.
        """
        seconds = self.RECENCY_WINDOW_OVERRIDES.get(
            entity_name.strip().lower(), self.RECENCY_WINDOW_SECONDS
        )
        return timedelta(seconds=seconds)

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to uppercase before Literal validation runs,
        so `LOG_LEVEL=debug` is accepted.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    @field_validator("RECENCY_WINDOW_SECONDS")
    def check_recency_window(cls, v: int) -> int:
        if v < 0:
            raise ValueError("RECENCY_WINDOW_SECONDS must not be negative")
        return v

    @field_validator("RECENCY_WINDOW_OVERRIDES", mode="before")
    def normalize_overrides(cls, v: dict | None) -> dict[str, int]:
        return normalize_window_overrides(v)

    model_config = SettingsConfigDict(
        # .env at the package root, next to config/
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings come only from the environment, so one instance per process is enough.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
