"""
Configuration management using Pydantic settings.
Handles the database URL, connection pool sizing and logging for the data access layer.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache
import logging


def to_async_url(url: Optional[str]) -> Optional[str]:
    """Rewrite plain postgresql:// URLs to use the asyncpg driver."""
    if url and url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Data access settings with environment variable support."""

    # Application configuration
    app_name: str = "LightBnB Data Access"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database configuration
    database_url: Optional[str] = None

    # Individual database components used when no URL is given
    postgres_db: str = "lightbnb"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # Integration test database, tests are skipped when unset
    test_database_url: Optional[str] = None

    # Connection pool settings
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 3600
    pool_pre_ping: bool = True

    # Result size defaults
    default_result_limit: int = 10

    @field_validator("database_url", "test_database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure the async driver is used."""
        return to_async_url(v)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level against the logging module's level names."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("pool_size", "default_result_limit")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @model_validator(mode="after")
    def build_database_url(self):
        """Build database URL from components if not provided directly."""
        if not self.database_url:
            self.database_url = (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the process lifecycle.
    """
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # SQL echo follows debug mode
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
