from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "POS Analytics"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./pos_analytics.db"
    PAGE_SIZE: int = 1000

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_SQL: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    AUTH_REQUIRED: bool = False

    # ==============================
    # Display
    # ==============================
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_LANGUAGE: str = "en"

    # ==============================
    # Analytics
    # ==============================
    DEFAULT_PERIOD: str = "last30days"
    TOP_PRODUCTS_LIMIT: int = 10


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
