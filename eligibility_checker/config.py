"""
Configuration settings for the Eligibility Checker.

Uses Pydantic Settings to load environment variables for database connections,
logging, and the eligibility rule. Settings are read once at the boundary
(CLI) and passed down explicitly to the components that need them.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("eligibility_db", alias="DB_NAME")

    # Pool and timeouts
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE", ge=0)
    db_pool_max_size: int = Field(20, alias="DB_POOL_MAX_SIZE", ge=1)
    db_pool_timeout_seconds: float = Field(5.0, alias="DB_POOL_TIMEOUT_SECONDS", gt=0)
    db_connect_timeout_seconds: int = Field(2, alias="DB_CONNECT_TIMEOUT_SECONDS", ge=1)
    db_statement_timeout_ms: int = Field(5000, alias="DB_STATEMENT_TIMEOUT_MS", ge=0)
    db_startup_retries: int = Field(5, alias="DB_STARTUP_RETRIES", ge=1)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Eligibility rule
    eligibility_threshold_years: int = Field(18, alias="ELIGIBILITY_THRESHOLD_YEARS", ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def dsn(self) -> str:
        """Compose a libpq connection string from the database fields."""
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
