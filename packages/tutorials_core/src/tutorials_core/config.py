"""
Runtime settings for the tutorials service.
"""

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SQLITE_DEFAULT_URL = "sqlite+aiosqlite:///tutorials.db"


class TutorialsSettings(BaseSettings):
    """
    Settings shared by the data layer and the HTTP service.
    Values come from the environment first, then from an optional `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Basic Environment ---
    DEBUG: bool = True
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # --- Database Core ---
    DATABASE_URL: str | None = None
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # --- HTTP Server ---
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"  # noqa: S104
    PORT: int = 8080

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    # --- Feature Flags ---
    ENABLE_REQUEST_ID: bool = True
    ENABLE_CORS: bool = True
    CORS_ORIGINS: list[str] = ["http://localhost:8081"]

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_api_prefix(cls, value: str) -> str:
        """
        >>> TutorialsSettings(API_PREFIX="api/").API_PREFIX
        '/api'
        """
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    @model_validator(mode="after")
    def validate_database(self) -> "TutorialsSettings":
        """Production must point at a real database, not the local SQLite file."""
        if self.ENVIRONMENT == "production" and not self.DATABASE_URL:
            raise ValueError("DATABASE_URL is mandatory in production mode.")
        return self

    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT == "development"

    def get_database_url(self) -> str:
        return self.DATABASE_URL or SQLITE_DEFAULT_URL


# Singleton instance for service use
tutorials_settings = TutorialsSettings()
