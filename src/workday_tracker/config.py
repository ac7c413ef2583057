"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    default_timezone: str = "UTC"
    week_start: int = 0
    today_cache_ttl_seconds: float = 10
    timer_interval_seconds: float = 1.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("week_start", mode="before")
    @classmethod
    def _validate_week_start(cls, value: object) -> int:
        return parse_week_start(value)


def parse_week_start(raw: object) -> int:
    """Parse the first day of the week as 0 (Monday) to 6 (Sunday)."""
    if isinstance(raw, int):
        day = raw
    else:
        cleaned = str(raw).strip().lower()
        if cleaned in WEEKDAYS:
            return WEEKDAYS.index(cleaned)
        if not cleaned.isdigit():
            raise ValueError(f"Invalid week start: {raw!r}")
        day = int(cleaned)
    if not 0 <= day < len(WEEKDAYS):
        raise ValueError(f"Week start out of range: {raw!r}")
    return day
