"""
Application configuration.
"""

from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # Core Settings
    PROJECT_NAME: str = "Resource Service"
    PROJECT_DESCRIPTION: str = "CRUD API for managing resources"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # API Settings
    API_PREFIX: str = "/api"
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://localhost:3001"

    # Database Settings
    DATABASE_URI: str = "sqlite+aiosqlite:///./database.sqlite"
    DB_ECHO: bool = False

    @field_validator("DATABASE_URI", mode="before")
    @classmethod
    def use_async_driver(cls, v: Any) -> Any:
        # Plain sqlite URLs are upgraded to the async driver
        if isinstance(v, str) and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    # Pagination Settings
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    # Sentry Settings
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # Prometheus Metrics
    ENABLE_METRICS: bool = True

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
