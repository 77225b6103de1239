"""Configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from audit_trail.core.constants import DEFAULT_RECORD_ID_PROPERTY, DEFAULT_SCHEMA


class Settings(BaseSettings):
    """Settings loaded from AUDIT_TRAIL_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_TRAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Table name resolution
    default_schema: str = DEFAULT_SCHEMA

    # Record identity
    record_id_property: str = DEFAULT_RECORD_ID_PROPERTY

    # Token used by the ORM listeners when no audit context is set
    system_user_token: str = "system"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name.

        Raises:
            ValueError: If the level is not a standard logging level
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
