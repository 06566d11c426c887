"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_anon_key: str
    environment: str = _ENVIRONMENT
    menu_images_bucket: str = "food_images"
    menu_fetch_retries: int = 3
    menu_fetch_retry_delay_seconds: float = 2.0
    app_name: str = "Annapurna Mess"
    featured_items_limit: int = 4
    session_cookie_secure: bool = False
    session_cookie_max_age_seconds: int = 60 * 60 * 24 * 7

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
