"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIDYAPI_",
        extra="ignore",
    )

    max_seconds_gap: int = Field(
        default=300,
        ge=0,
        description="Maximum allowed difference in seconds between header timestamp and validation time",
    )
    log_rejections: bool = Field(
        default=True,
        description="Log rejected validations at INFO level (DEBUG otherwise)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
