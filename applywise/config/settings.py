"""Configuration settings for ApplyWise."""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from applywise.tracker.models import Priority


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Analytics windows
    follow_up_window_days: Annotated[int, Field(gt=0)] = Field(
        default=3,
        description="Days ahead of now in which a follow-up counts as due",
    )
    recent_window_days: Annotated[int, Field(gt=0)] = Field(
        default=7,
        description="Days back from now that count as 'this week'",
    )
    snooze_days: Annotated[int, Field(gt=0)] = Field(
        default=7,
        description="Days a follow-up is pushed out when scheduled without a date",
    )

    # Defaults for new applications
    default_priority: Priority = Field(
        default=Priority.MEDIUM,
        description="Priority given to applications created without one",
    )

    # Paths
    snapshot_path: Path = Field(
        default=Path("./data/applications.yaml"),
        description="YAML or JSON file the CLI loads applications from",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )

    @field_validator("default_priority", mode="before")
    @classmethod
    def validate_default_priority(cls, v: str | Priority) -> Priority:
        """Accept priority labels case-insensitively."""
        if isinstance(v, Priority):
            return v
        if isinstance(v, str):
            for priority in Priority:
                if priority.value.lower() == v.strip().lower():
                    return priority
            raise ValueError(
                f"Invalid priority: {v}. Must be one of "
                f"{', '.join(p.value for p in Priority)}"
            )
        raise ValueError(f"Invalid priority type: {type(v)}")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
