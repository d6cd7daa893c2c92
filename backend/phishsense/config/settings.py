"""
PhishSense Application Configuration

Configuration management using pydantic-settings.
All configuration values are loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values can be set via:
    1. Environment variables
    2. .env file (local development)
    3. Default values defined here
    """

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "PhishSense"
    app_version: str = "2.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # =========================================================================
    # Server
    # =========================================================================
    host: str = "0.0.0.0"
    port: int = Field(default=8000, description="HTTP port")
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # =========================================================================
    # Analysis
    # =========================================================================
    sensitivity: str = Field(default="medium", description="low, medium or high")
    enable_ml: bool = Field(default=True, description="Accept external ML votes")
    ml_confidence_floor: float = Field(default=0.5, ge=0.0, le=1.0)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Use get_settings.cache_clear() to reload settings.
    """
    return Settings()
