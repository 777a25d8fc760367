"""
Application settings loaded from environment variables.

Uses pydantic-settings for type-safe configuration with .env file support.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global application settings."""

    # App
    APP_NAME: str = "rPP Admin Console"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Marketplace backend
    BACKEND_API_URL: str = "http://localhost:5000/api"
    BACKEND_TIMEOUT_SECONDS: float = 15.0

    # Redis
    REDIS_URL: str = "redis://localhost:6379"
    REDIS_SSL: bool = False

    # Sessions
    SESSION_TTL_SECONDS: int = 60 * 60 * 12
    CHAT_STATE_TTL_SECONDS: int = 900  # 15 minutes

    # Chat lead sink the assistant submits to
    CHATLEAD_URL: str = "http://localhost:8000/api/chatlead"

    # Listing
    ROWS_PER_PAGE: int = 10

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
