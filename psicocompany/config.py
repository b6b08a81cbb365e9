"""
Configuration and settings for the web front-end.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")
    site_name: str = Field(default="Psicocompany")

    # Backend-as-a-service (Supabase)
    supabase_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: Optional[str] = Field(
        default=None, alias="SUPABASE_ANON_KEY"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="PSICO_USE_IN_MEMORY_BACKENDS"
    )

    # Toasts
    toast_default_duration: float = Field(default=5.0, ge=0)

    # Cookies
    session_cookie_name: str = Field(default="psico_access_token")
    refresh_cookie_name: str = Field(default="psico_refresh_token")
    toast_cookie_name: str = Field(default="psico_toasts")
    cookie_secure: bool = Field(default=False, alias="PSICO_COOKIE_SECURE")

    host: str = Field(default="127.0.0.1", alias="PSICO_HOST")
    port: int = Field(default=8000, alias="PSICO_PORT")
    log_level: str = Field(default="INFO", alias="PSICO_LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
