"""Application configuration."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    timezone: str = "UTC"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="DIET_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None) -> ZoneInfo:
    """Resolve the calendar timezone used for per-day meal queries."""
    cleaned = (raw or "").strip()
    if not cleaned:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {cleaned}") from exc
