"""Configuration loading for the Flare error-reporting SDK.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flare.adapters.transport.dsn import Dsn


class Settings(BaseSettings):
    """SDK configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. Variables are prefixed with
    ``FLARE_``, e.g. ``FLARE_DSN``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Delivery configuration
    dsn: str = Field(
        default="",
        description="DSN of the project events are sent to (empty prints events to stdout)",
    )
    transport_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for each event delivery request",
    )

    # Event defaults
    environment: str | None = Field(
        default=None,
        description="Environment name added to every event",
    )
    release: str | None = Field(
        default=None,
        description="Release identifier added to every event",
    )
    server_name: str | None = Field(
        default=None,
        description="Server name added to every event",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("dsn")
    @classmethod
    def validate_dsn(cls, v: str) -> str:
        """Ensure a configured DSN parses."""
        if v:
            Dsn.parse(v)
        return v

    @field_validator("transport_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure transport timeout is positive."""
        if v <= 0:
            raise ValueError("transport_timeout_seconds must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load SDK settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
