"""Application configuration."""

import os
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    timezone: str = "UTC"
    default_plan_days: int = 7

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def today_in(timezone_name: str) -> date:
    """Return today's calendar date in the given IANA timezone."""
    return datetime.now(tz=ZoneInfo(timezone_name)).date()
