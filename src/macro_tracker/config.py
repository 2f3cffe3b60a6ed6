"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from macro_tracker.services.units import COUNTABLE_UNITS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    default_timezone: str = "UTC"
    calorie_goal_tolerance_pct: float = 0.0
    countable_units: str | None = None
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_countable_units(raw: str | None) -> frozenset[str]:
    """Parse the countable unit vocabulary, falling back to the default list."""
    if raw is None:
        return COUNTABLE_UNITS
    words = {chunk.strip().lower() for chunk in raw.split(",")}
    words.discard("")
    return frozenset(words) or COUNTABLE_UNITS
