"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_PLACEHOLDER_URL = "https://placeholder.supabase.co"
_PLACEHOLDER_KEY = "placeholder"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_key: str | None = None
    api_base_url: str = "http://localhost:8000"
    data_dir: Path = Path.home() / ".neurostack"
    rxterms_base_url: str = "https://clinicaltables.nlm.nih.gov/api/rxterms/v3"
    autosave_delay_seconds: float = 1.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def is_supabase_configured(url: str | None, key: str | None) -> bool:
    """Return True when both Supabase values are set and not placeholders."""
    if not url or not key:
        return False
    return url != _PLACEHOLDER_URL and key != _PLACEHOLDER_KEY
