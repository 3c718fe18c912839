# backend/interview_booking/core/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Runtime configuration for the booking engine."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite:///./interview_booking.db")
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis used for slot locks. Locks are skipped when unset.",
    )

    # Single fixed zone for every date/time the engine reasons about
    timezone: str = Field(default="America/New_York")

    slot_duration_minutes: int = Field(default=30, ge=5)

    # Month cache policy
    cache_stale_after_minutes: int = Field(default=60, ge=1)
    cache_invalidation_months: int = Field(default=6, ge=1)
    cache_expiry_days: int = Field(default=180, ge=1)
    cache_warm_months_ahead: int = Field(default=6, ge=0)
    cache_stats_months: int = Field(default=12, ge=1)

    # Month availability request bounds
    availability_min_year: int = Field(default=2024)
    availability_max_year: int = Field(default=2030)

    slot_lock_ttl_seconds: int = Field(default=30, ge=1)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {value}")
        return value


settings = Settings()
