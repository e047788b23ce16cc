"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SEGMENTS: list[str] = [
    "Day-to-Day",
    "Week-to-Week",
    "Month-to-Month",
    "Indefinite",
    "Game-Time Decision",
    "Robidas Island",
    "Maintenance Day",
    "Until Playoffs",
]


class WheelSettings(BaseSettings):
    """Wheel layout and spin timing."""

    model_config = SettingsConfigDict(
        env_prefix="INJURY_WHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    segments: list[str] = Field(default_factory=lambda: list(DEFAULT_SEGMENTS))

    # Shared by the resolution timer and every renderer's spin animation
    spin_duration_ms: int = Field(default=3000, ge=0)

    min_extra_turns: int = Field(default=5, ge=1)
    max_extra_turns: int = Field(default=9, ge=1)

    @field_validator("segments")
    @classmethod
    def _check_segments(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one segment is required")
        if any(not label.strip() for label in value):
            raise ValueError("segment labels must not be blank")
        return value

    @model_validator(mode="after")
    def _check_turns(self) -> "WheelSettings":
        if self.max_extra_turns < self.min_extra_turns:
            raise ValueError("max_extra_turns must be >= min_extra_turns")
        return self


class AISettings(BaseSettings):
    """AI service settings."""

    model_config = SettingsConfigDict(
        env_prefix="INJURY_WHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "gemini_api_key"),
    )

    gemini_model: str = "gemini-2.5-flash"

    # Timeouts
    request_timeout: float = Field(default=15.0, gt=0)  # per attempt
    fetch_timeout: float = Field(default=30.0, gt=0)  # whole outcome fetch

    # Retry settings
    max_retries: int = Field(default=2, ge=1)
    retry_delay: float = Field(default=1.0, ge=0)

    temperature: float = 0.9
    max_output_tokens: int = 1024

    # Generation log is off unless a directory is given
    log_dir: Optional[Path] = None


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="INJURY_WHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Spin this many times and exit instead of waiting for Enter
    auto_spins: int = Field(default=0, ge=0)

    # Nested settings
    wheel: WheelSettings = Field(default_factory=WheelSettings)
    ai: AISettings = Field(default_factory=AISettings)

    @property
    def ai_enabled(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.ai.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
