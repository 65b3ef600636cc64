"""
Configuration management for the Speech Review application.
Handles environment variables and application settings for both the API and the CLI client.
"""

import os
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    app_version: str = "1.0.0"

    # Dataset configuration
    dataset_path: str = os.getenv("DATASET_PATH", "./dataset")
    metadata_filename: str = "metadata.tsv"
    audio_dirname: str = "wavs"
    static_prefix: str = os.getenv("STATIC_PREFIX", "/api/static")

    # Database configuration
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./reviews.db")

    # Logging configuration
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # CORS configuration
    cors_origins_str: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from environment variable."""
        return [origin.strip() for origin in self.cors_origins_str.split(",")]

    # Client configuration
    api_url: str = os.getenv("API_URL", "http://localhost:8000")
    api_timeout: float = 10.0
    row_height: int = int(os.getenv("ROW_HEIGHT", "220"))
    player_command: str = os.getenv("PLAYER_COMMAND", "ffplay -nodisp -autoexit -loglevel quiet")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
