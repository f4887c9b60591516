"""Tests for nutrition resolution."""

import asyncio

import httpx

from nutrition_engine.domain.nutrition import ProfileSource, SearchCriteria, SpiceLevel
from nutrition_engine.services.knowledge_base import KnowledgeBase
from tests.conftest import (
    FailingCacheStorage,
    FakeSpoonacularClient,
    InMemoryCacheStorage,
    build_service,
    empty_search_client,
)


def test_curated_dish_used_when_provider_misses() -> None:
    service = build_service(empty_search_client())

    profile = asyncio.run(service.resolve("adobo"))

    assert profile.source == ProfileSource.CURATED
    assert profile.nutrition.calories == 350
    assert profile.nutrition.protein == 25
    assert set(profile.allergens) == {"soy"}
    assert profile.spice_level == SpiceLevel.MILD


def test_curated_dish_used_when_provider_errors() -> None:
    client = FakeSpoonacularClient(error=httpx.ReadTimeout("slow"))
    service = build_service(client)

    profile = asyncio.run(service.resolve("Sisig"))

    assert profile.id == "curated_sisig"
    assert profile.nutrition.calories == 450


def test_provider_result_wins_over_curated() -> None:
    service = build_service(FakeSpoonacularClient())

    profile = asyncio.run(service.resolve("adobo"))

    assert profile.source == ProfileSource.PROVIDER
    assert profile.nutrition.calories == 512


def test_ingredients_use_recipe_analysis() -> None:
    client = FakeSpoonacularClient()
    service = build_service(client)

    profile = asyncio.run(
        service.resolve(
            "Lechon Kawali", [{"name": "pork belly"}, {"ingredientName": "soy sauce"}]
        )
    )

    assert profile.id == "spoon_ingredients_lechon_kawali"
    assert client.parse_calls == 1
    assert client.search_calls == 0


def test_cache_short_circuits_later_lookups() -> None:
    service = build_service(empty_search_client())
    first = asyncio.run(service.resolve("sisig"))

    service.provider = None
    service.knowledge_base = KnowledgeBase(dishes={})
    second = asyncio.run(service.resolve("sisig"))

    assert second == first


def test_cache_hit_skips_provider() -> None:
    client = FakeSpoonacularClient()
    service = build_service(client)

    asyncio.run(service.resolve("Chicken Curry"))
    asyncio.run(service.resolve("chicken curry"))

    assert client.search_calls == 1


def test_resolution_writes_normalized_key() -> None:
    storage = InMemoryCacheStorage()
    service = build_service(empty_search_client(), storage)

    asyncio.run(service.resolve("  Bicol Express! "))

    assert list(storage.records) == ["bicol express"]


def test_unknown_dish_is_estimated() -> None:
    service = build_service(empty_search_client())

    profile = asyncio.run(service.resolve("xyz-unknown-dish-123"))

    assert profile.source == ProfileSource.ESTIMATED
    assert profile.nutrition.calories > 0
    assert profile.spice_level is not None
    assert profile.dietary_tags is not None


def test_resolve_survives_broken_storage() -> None:
    service = build_service(
        FakeSpoonacularClient(error=RuntimeError("down")), FailingCacheStorage()
    )

    profile = asyncio.run(service.resolve("pancit canton"))

    assert profile.id == "curated_pancit_canton"


def test_resolve_without_provider() -> None:
    service = build_service(None)

    profile = asyncio.run(service.resolve("Tinola"))

    assert profile.id == "curated_tinola"


def test_strict_matching_skips_partial_curated_match() -> None:
    service = build_service(empty_search_client(), exact_only=True)

    profile = asyncio.run(service.resolve("Chicken Adobo"))

    assert profile.source == ProfileSource.ESTIMATED


def test_concurrent_identical_requests_share_one_lookup() -> None:
    client = FakeSpoonacularClient()
    service = build_service(client)

    async def resolve_many():  # type: ignore[no-untyped-def]
        return await asyncio.gather(
            *(service.resolve("Chicken Curry") for _ in range(5))
        )

    profiles = asyncio.run(resolve_many())

    assert client.search_calls == 1
    assert all(profile == profiles[0] for profile in profiles)
    assert service._in_flight == {}


def test_search_never_touches_provider() -> None:
    client = FakeSpoonacularClient(error=RuntimeError("must not be called"))
    service = build_service(client)
    criteria = SearchCriteria(max_calories=300, dietary_tags=("healthy",))

    dishes = service.search_dishes_by_criteria(criteria)

    assert set(dishes) <= set(service.list_known_dishes())
    assert client.search_calls == 0


def test_clear_cache_forces_new_resolution() -> None:
    client = FakeSpoonacularClient()
    storage = InMemoryCacheStorage()
    service = build_service(client, storage)
    asyncio.run(service.resolve("Chicken Curry"))

    service.clear_cache()
    asyncio.run(service.resolve("Chicken Curry"))

    assert client.search_calls == 2
    assert list(storage.records) == ["chicken curry"]


def test_check_compatibility_uses_resolved_profile() -> None:
    service = build_service(empty_search_client())
    profile = asyncio.run(service.resolve("kare-kare"))

    result = service.check_compatibility(profile, ["Peanut"])

    assert result.is_safe is False
    assert result.conflicting_allergens == ("peanuts",)
