"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_seating.db")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # Tables
    TABLE_COUNT: int = 20
    DEFAULT_TABLE_CAPACITY: int = 8
    MIN_TABLE_CAPACITY: int = 1
    MAX_TABLE_CAPACITY: int = 10

    # Out-of-range table number used to park rows while a swap is in flight
    STAGING_TABLE_NUMBER: int = 999

    # Couples
    COUPLE_COLORS: List[str] = ["blue", "green", "purple", "pink"]

    # Guests
    HOST_TAGS: List[str] = ["bride", "groom"]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    class Config:
        env_file = ".env"

settings = Settings()
