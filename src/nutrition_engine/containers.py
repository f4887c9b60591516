"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from nutrition_engine.adapters.json_file_cache_storage import JsonFileCacheStorage
from nutrition_engine.adapters.spoonacular_client import HttpxSpoonacularClient
from nutrition_engine.adapters.supabase_cache_storage import SupabaseCacheStorage
from nutrition_engine.config import Settings
from nutrition_engine.services.cache import CacheStorage, NutritionCache
from nutrition_engine.services.knowledge_base import KnowledgeBase
from nutrition_engine.services.nutrition import NutritionService
from nutrition_engine.services.provider import SpoonacularNutritionProvider


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    close_resources: Callable[[], Awaitable[None]]


def build_cache_storage(settings: Settings) -> CacheStorage:
    """Create the durable cache storage selected in settings."""
    if settings.cache_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase cache backend requires URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseCacheStorage(client)
    if settings.cache_backend == "file":
        return JsonFileCacheStorage(Path(settings.cache_path))
    raise ValueError(f"Unknown cache backend: {settings.cache_backend}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    exact_only = resolved_settings.strict_matching
    spoonacular_client = HttpxSpoonacularClient.create(
        api_key=resolved_settings.spoonacular_api_key,
        base_url=resolved_settings.spoonacular_base_url,
        timeout_seconds=resolved_settings.provider_timeout_seconds,
    )
    provider = SpoonacularNutritionProvider(
        client=spoonacular_client,
        retry_attempts=resolved_settings.provider_retry_attempts,
    )
    cache = NutritionCache.from_storage(
        build_cache_storage(resolved_settings), exact_only=exact_only
    )
    nutrition_service = NutritionService(
        provider=provider,
        cache=cache,
        knowledge_base=KnowledgeBase(exact_only=exact_only),
        exact_only=exact_only,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        cache.flush()
        await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        close_resources=close_resources,
    )
