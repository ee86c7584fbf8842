"""Encoder configuration using Pydantic Settings.

Configuration is loaded from environment variables.

Optionally, point `ENV_FILE` at a local env file (for development). When
`ENV_FILE` is unset or empty no env file is read.
"""

import logging
import os
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnvironment(str, Enum):
    """Application environment values."""

    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class Settings(BaseSettings):
    """
    Encoder settings with type validation.

    Configuration is loaded from environment variables, with support
    for .env files in development.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # Application
    app_env: AppEnvironment = AppEnvironment.LOCAL
    app_name: str = "odrl-policy-encoder"
    app_log_level: str = "INFO"

    # Observability
    observability_structured_logs: bool = True

    # Maximum nesting of constraints and duty consequences in one rule
    encoder_max_depth: int = Field(default=32, ge=1)

    # Participant id -> IRI mapping used by the command line encoder
    # Example: PARTICIPANT_IRI_MAP='{"BPNL000000000001": "did:web:supplier.example"}'
    participant_iri_map: dict[str, str] = Field(default_factory=dict)

    @field_validator("app_env", mode="before")
    @classmethod
    def validate_app_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        """Validate and parse app_env to AppEnvironment enum."""
        if isinstance(v, AppEnvironment):
            return v
        try:
            return AppEnvironment(v.lower())
        except ValueError:
            raise ValueError(
                f"app_env must be one of {[e.value for e in AppEnvironment]}, got '{v}'"
            )

    @field_validator("app_log_level")
    @classmethod
    def validate_app_log_level(cls, v: str) -> str:
        """Normalize the log level and reject names logging does not know."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"app_log_level must be a logging level name, got '{v}'")
        return level


settings = Settings()
