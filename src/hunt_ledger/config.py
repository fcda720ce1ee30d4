"""Application configuration."""

import os
from datetime import timedelta
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from hunt_ledger.domain.sessions import SessionStatus

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    blob_backend: Literal["local", "supabase"] = "local"
    photos_dir: str = "photos"
    supabase_photos_bucket: str = "photos"
    initial_session_status: SessionStatus = SessionStatus.NOT_STARTED
    access_code_length: int = 6
    access_code_attempts: int = 10
    orphan_grace_seconds: int = 3600
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def orphan_grace(self) -> timedelta:
        return timedelta(seconds=self.orphan_grace_seconds)
