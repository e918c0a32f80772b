"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from newsdesk.core.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_RETRY_DELAY_MS,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_SCHEDULE_TIMEZONE,
    DEFAULT_STATE_FILE_PATH,
    DEFAULT_URGENCY_THRESHOLD,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Core
    env: Literal["development", "staging", "production"] = Field(
        default="development", alias="NEWSDESK_ENV"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="NEWSDESK_LOG_LEVEL"
    )

    # Pipeline
    urgency_threshold: float = Field(
        default=DEFAULT_URGENCY_THRESHOLD,
        ge=0,
        le=10,
        description="Urgency score at or above which breaking news overrides the schedule",
    )
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=10)
    retry_delay_ms: int = Field(
        default=DEFAULT_RETRY_DELAY_MS,
        ge=0,
        description="Base delay before the first retry; doubles on each further retry",
    )
    max_retry_delay_ms: int = Field(default=DEFAULT_MAX_RETRY_DELAY_MS, ge=0)
    state_file_path: Path = Field(default=Path(DEFAULT_STATE_FILE_PATH))

    # Manual override (skips detection and schedule)
    override_topic: str | None = Field(default=None)
    override_content_type: Literal["breaking_news", "educational"] = Field(
        default="breaking_news"
    )

    # Schedule
    schedule_timezone: str = Field(default=DEFAULT_SCHEDULE_TIMEZONE)
    scheduler_enabled: bool = Field(default=False)

    # Import path of a factory returning pipeline Collaborators ("module:function")
    collaborators: str | None = Field(default=None, alias="NEWSDESK_COLLABORATORS")

    @field_validator("override_topic", mode="before")
    @classmethod
    def blank_override_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("schedule_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.schedule_timezone)

    @property
    def is_production(self) -> bool:
        return self.env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
