"""
Configuration management.

Centralized environment variable management and validation.
"""

from typing import Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore"
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"

    # External render service
    # RENDERER_URL: Base URL of the render backend (POST {url}/api/video/generate)
    renderer_url: str = "http://localhost:3001"
    renderer_timeout_seconds: float = 600.0

    # Quality validation
    # ASSET_FETCH_TIMEOUT_SECONDS: How long to wait when checking a rendered asset is reachable
    asset_fetch_timeout_seconds: float = 30.0

    @field_validator("renderer_url")
    @classmethod
    def validate_renderer_url(cls, v: str) -> str:
        """Validate renderer URL format."""
        if not v:
            raise ConfigError("RENDERER_URL is required")
        if not v.startswith(("http://", "https://")):
            raise ConfigError("RENDERER_URL must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    @field_validator("renderer_timeout_seconds", "asset_fetch_timeout_seconds")
    @classmethod
    def validate_positive_timeout(cls, v: float) -> float:
        """Timeouts must be positive."""
        if v <= 0:
            raise ConfigError(f"Timeout must be positive, got {v}")
        return v


# Singleton instance
try:
    settings = Settings()
except Exception as e:
    # Re-raise as ConfigError for consistency
    if isinstance(e, ConfigError):
        raise
    raise ConfigError(f"Failed to load configuration: {str(e)}") from e
