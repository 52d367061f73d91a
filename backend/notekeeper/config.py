"""
Notekeeper API - Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the service wiring and the entry point.
When:  Loaded once at module import time.

Environment variables (case-insensitive):
    RATE_LIMIT_REQUESTS       Accepted note creations per client per window
    RATE_LIMIT_WINDOW         Window length in seconds
    RATE_LIMIT_CLEANUP_EVERY  Prune idle clients every N limiter checks
    CORS_ORIGINS              Comma-separated list of allowed origins
    BACKEND_HOST / BACKEND_PORT
    LOG_LEVEL
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for running a single local instance.
    Attributes are grouped by concern.
    """

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # Per-client sliding window, applied to note creation only
    rate_limit_requests: int = Field(default=5, ge=1, le=10000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds
    rate_limit_cleanup_every: int = Field(default=1000, ge=1)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
