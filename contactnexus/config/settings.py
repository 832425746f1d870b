"""
Application settings and configuration management.

This module centralizes all application configuration using Pydantic settings
for type validation and environment variable handling.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Main application settings class.

    Uses Pydantic BaseSettings to automatically load configuration from:
    1. Environment variables
    2. .env file
    3. Default values defined here
    """

    # Application Configuration
    debug: bool = True
    log_level: str = "INFO"

    # API Configuration
    api_v1_str: str = "/api/v1"
    project_name: str = "ContactNexus"

    # Seed data
    seed_demo_data: bool = True
    seed_file: Optional[str] = None

    # Smart group suggestions
    suggestion_api_url: Optional[str] = None
    suggestion_timeout: float = 10.0

    # Contact limits
    max_alternative_numbers: int = 5
    max_addresses: int = 3

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


# Global settings instance
# This will be imported throughout the application for configuration access
settings = Settings()
