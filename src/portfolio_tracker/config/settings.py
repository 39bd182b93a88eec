"""Application settings and configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_tracker.domain.models.enums import TimeRange


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PORTFOLIO_",
    )

    app_name: str = "Portfolio Performance Tracker"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Window used when a request does not name one
    default_time_range: TimeRange = TimeRange.ONE_MONTH

    # Series granularity: 1D steps intraday, every other window steps by days
    intraday_step_minutes: int = Field(default=60, gt=0)
    daily_step_days: int = Field(default=1, gt=0)

    # Decimal places kept on percentage figures
    percent_places: int = Field(default=2, ge=0)


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (used by tests and embedding callers)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
