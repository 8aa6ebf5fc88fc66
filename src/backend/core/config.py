"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IDEA_CATEGORIES = (
    "User Interface,Performance,Security,Integration,"
    "Analytics,Mobile Experience,New Feature,Other"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "IdeaBox"
    APP_ENV: str = "development"
    DEBUG: bool = False
    SECRET_KEY: str = ""  # Required - loaded from environment

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_required_secrets(cls, v: str, info: Any) -> str:
        """Validate that required secrets are set."""
        if not v:
            raise ValueError(f"{info.field_name} must be set in environment")
        return v

    # Storage backend: "postgres" for production, "memory" for tests and demos
    STORAGE_BACKEND: str = "postgres"

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Only the known backends can be selected."""
        backend = v.strip().lower()
        if backend not in ("postgres", "memory"):
            raise ValueError("STORAGE_BACKEND must be 'postgres' or 'memory'")
        return backend

    # Database - PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "ideabox"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "ideabox"
    POSTGRES_SSL: bool = True
    DATABASE_URL: str | None = None  # Overrides the POSTGRES_* settings when set

    @property
    def POSTGRES_URL(self) -> str:
        """Construct PostgreSQL connection URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
        return f"{url}?ssl=require" if self.POSTGRES_SSL else url

    # Seconds before a store call is abandoned and reported as unavailable
    STORE_TIMEOUT_SECONDS: float = 10.0

    # Authentication (tokens are issued by the external identity provider)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS - stored as comma-separated string to avoid pydantic-settings JSON parsing issues
    CORS_ORIGINS: str = "http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        import json

        try:
            return json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # Voting
    VOTES_PER_QUARTER: int = 5
    QUOTA_TIMEZONE: str = "UTC"  # Timezone used to decide quarter boundaries
    AUTO_VOTE_ON_SUBMIT: bool = True  # Submitters vote for their own idea

    # Ideas
    IDEA_CATEGORIES: str = DEFAULT_IDEA_CATEGORIES

    @property
    def idea_categories_list(self) -> list[str]:
        """Get the default idea categories as a list."""
        return [category.strip() for category in self.IDEA_CATEGORIES.split(",") if category.strip()]

    # Change notifications
    CHANGE_FEED_QUEUE_SIZE: int = 100


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
