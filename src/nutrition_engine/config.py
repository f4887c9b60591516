"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    spoonacular_api_key: str
    spoonacular_base_url: str = "https://api.spoonacular.com"
    admin_token: str
    cache_backend: str = "file"
    cache_path: str = "data/nutrition_cache.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    strict_matching: bool = False
    provider_retry_attempts: int = 1
    provider_timeout_seconds: float = 15
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allergen_list(raw: str | None) -> list[str]:
    """Parse a comma-separated allergen list into trimmed names."""
    if raw is None:
        return []
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]
