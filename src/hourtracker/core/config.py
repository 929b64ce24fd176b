from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Hour Tracker"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./hourtracker.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_busy_timeout_seconds: float = 30.0  # SQLite only: wait for the write lock

    # Deadline applied to every store operation unless the caller passes one
    operation_timeout_seconds: float = 10.0

    # Time entries
    batch_max_entries: int = 100
    default_page_size: int = 20
    max_page_size: int = 100

    # Audit
    audit_enabled: bool = True

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only async drivers are usable by the record store."""
        if not v.startswith(("sqlite+aiosqlite://", "postgresql+asyncpg://")):
            raise ValueError(
                "DATABASE_URL must use an async driver: "
                "sqlite+aiosqlite:// or postgresql+asyncpg://"
            )
        return v

    @field_validator("batch_max_entries", "max_page_size", "default_page_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("operation_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("OPERATION_TIMEOUT_SECONDS must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
