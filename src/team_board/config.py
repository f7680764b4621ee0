"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    store_backend: Literal["apps_script", "supabase"] = "apps_script"
    store_url: str | None = None
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    budget_backend: Literal["local", "remote"] = "local"
    state_file: Path = Path(".team_board_state.json")
    slideshow_interval_seconds: float = 3.0
    request_timeout_seconds: float = 15.0
    openai_api_key: str | None = None
    transcription_model: str = "whisper-1"
    transcription_language: str | None = "es"
    currency_markers: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_store(self) -> "Settings":
        if self.store_backend == "apps_script" and not self.store_url:
            raise ValueError("store_url is required for the apps_script backend")
        if self.store_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_key
        ):
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase backend"
            )
        if self.slideshow_interval_seconds <= 0:
            raise ValueError("slideshow_interval_seconds must be positive")
        return self


def parse_currency_markers(raw: str | None) -> tuple[str, ...] | None:
    """Parse a comma separated list of currency markers from env."""
    if raw is None:
        return None
    markers: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value and value not in markers:
            markers.append(value)
    return tuple(markers) or None
