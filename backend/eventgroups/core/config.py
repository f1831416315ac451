"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Event Groups"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    # "json", "console", or "auto" (json in production)
    LOG_FORMAT: str = "auto"

    # Server
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/eventgroups.db"
    DATABASE_URL_SYNC: str = "sqlite:///./data/eventgroups.db"
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True

    # REST API mount point, and where the web views reach it.
    # A relative API_BASE_URL means "this process".
    API_PREFIX: str = "/api"
    API_BASE_URL: str = "/api"

    # Optimistic locking on event rosters
    REGISTRATION_MAX_RETRIES: int = 3

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
