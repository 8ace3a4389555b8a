"""
Centralized configuration using Pydantic Settings.

All environment variables are loaded and validated here.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Outbound API
    api_endpoint: str = ""
    api_token: str = ""
    forward_timeout: float = 30.0

    # Comma-separated addresses or @domain patterns; empty allows nobody
    allowed_emails: str = ""

    # Logging
    log_level: str = "INFO"
    log_json: bool = True  # False for colored console output in development

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Normalize LOG_LEVEL and reject names logging does not know."""
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level


# Global settings instance
settings = Settings()
