"""
Application configuration using Pydantic Settings.
Loads from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "GCH Hospital Front Desk API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "gch_hospital"

    # JWT Authentication
    SECRET_KEY: str = "gch-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours

    # Check-in queue
    CLINIC_TIMEZONE: str = "UTC"  # daily queue numbering restarts at local midnight
    DEFAULT_CHECKIN_REASON: str = "General checkup"
    QUEUE_INSERT_ATTEMPTS: int = 3

    # Check-in codes (GCH-XXXXX)
    CHECKIN_CODE_PREFIX: str = "GCH"
    CHECKIN_CODE_LENGTH: int = 5
    CHECKIN_CODE_ATTEMPTS: int = 10

    # QR rendering
    QR_BOX_SIZE: int = 10
    QR_BORDER: int = 2
    QR_DARK_COLOR: str = "#1e293b"
    QR_LIGHT_COLOR: str = "#ffffff"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = "logs"  # None disables file logging

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
