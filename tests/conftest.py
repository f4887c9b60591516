"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nutrition_engine.adapters.spoonacular_client import SpoonacularClient
from nutrition_engine.config import Settings
from nutrition_engine.containers import AppContainer
from nutrition_engine.services.cache import CacheStorage, NutritionCache
from nutrition_engine.services.knowledge_base import KnowledgeBase
from nutrition_engine.services.nutrition import NutritionService
from nutrition_engine.services.provider import SpoonacularNutritionProvider


@dataclass
class FakeSpoonacularClient(SpoonacularClient):
    """Fake Spoonacular client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "results": [
                {
                    "id": 715538,
                    "title": "Chicken Curry",
                    "servings": 4,
                    "vegetarian": False,
                    "vegan": False,
                    "glutenFree": True,
                    "dairyFree": False,
                    "veryHealthy": False,
                    "cheap": True,
                    "extendedIngredients": [
                        {"name": "chicken thighs"},
                        {"name": "coconut milk"},
                        {"name": "shrimp paste"},
                    ],
                }
            ]
        }
    )
    nutrition_payload: dict[str, object] = field(
        default_factory=lambda: {
            "calories": "512",
            "carbs": "20g",
            "fat": "30g",
            "protein": "38g",
            "nutrients": [
                {"name": "Calories", "amount": 512.4, "unit": "kcal"},
                {"name": "Fat", "amount": 30.2, "unit": "g"},
                {"name": "Saturated Fat", "amount": 12.0, "unit": "g"},
                {"name": "Carbohydrates", "amount": 19.6, "unit": "g"},
                {"name": "Net Carbohydrates", "amount": 17.1, "unit": "g"},
                {"name": "Sugar", "amount": 6.5, "unit": "g"},
                {"name": "Sodium", "amount": 840.0, "unit": "mg"},
                {"name": "Protein", "amount": 38.4, "unit": "g"},
                {"name": "Fiber", "amount": 2.5, "unit": "g"},
                {"name": "Iron", "amount": 3.4, "unit": "mg"},
                {"name": "Calcium", "amount": 60.0, "unit": "mg"},
                {"name": "Vitamin C", "amount": 11.0, "unit": "mg"},
            ],
        }
    )
    parsed_payload: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "name": "pork belly",
                "nutrition": {
                    "nutrients": [
                        {"name": "Calories", "amount": 518.0},
                        {"name": "Protein", "amount": 9.3},
                        {"name": "Fat", "amount": 53.0},
                        {"name": "Carbohydrates", "amount": 0.0},
                    ]
                },
            },
            {
                "name": "soy sauce",
                "nutrition": {
                    "nutrients": [
                        {"name": "Calories", "amount": 8.5},
                        {"name": "Protein", "amount": 1.3},
                        {"name": "Carbohydrates", "amount": 0.8},
                        {"name": "Sodium", "amount": 879.0},
                    ]
                },
            },
        ]
    )
    error: Exception | None = None
    search_calls: int = 0
    nutrition_calls: int = 0
    parse_calls: int = 0

    async def search_recipes(self, query: str, number: int = 1) -> dict[str, object]:
        self.search_calls += 1
        if self.error:
            raise self.error
        return self.search_payload

    async def get_recipe_nutrition(self, recipe_id: int) -> dict[str, object]:
        self.nutrition_calls += 1
        if self.error:
            raise self.error
        return self.nutrition_payload

    async def parse_ingredients(
        self, ingredients: Sequence[str], servings: int = 1
    ) -> list[dict[str, object]]:
        self.parse_calls += 1
        if self.error:
            raise self.error
        return self.parsed_payload


@dataclass
class InMemoryCacheStorage(CacheStorage):
    """In-memory durable storage for tests."""

    records: dict[str, dict[str, object]] = field(default_factory=dict)
    saves: int = 0

    def load(self) -> dict[str, dict[str, object]]:
        return dict(self.records)

    def save(self, records: dict[str, dict[str, object]]) -> None:
        self.saves += 1
        self.records.update(records)

    def clear(self) -> None:
        self.records.clear()


@dataclass
class FailingCacheStorage(CacheStorage):
    """Storage whose every operation fails."""

    def load(self) -> dict[str, dict[str, object]]:
        raise OSError("disk unavailable")

    def save(self, records: dict[str, dict[str, object]]) -> None:
        raise OSError("disk unavailable")

    def clear(self) -> None:
        raise OSError("disk unavailable")


def empty_search_client() -> FakeSpoonacularClient:
    """Return a fake client whose searches find nothing."""
    return FakeSpoonacularClient(search_payload={"results": []}, parsed_payload=[])


def build_service(
    client: SpoonacularClient | None = None,
    storage: CacheStorage | None = None,
    *,
    exact_only: bool = False,
) -> NutritionService:
    """Build a nutrition service over fakes."""
    provider = (
        SpoonacularNutritionProvider(client, retry_delay_seconds=0)
        if client is not None
        else None
    )
    return NutritionService(
        provider=provider,
        cache=NutritionCache.from_storage(
            storage or InMemoryCacheStorage(), exact_only=exact_only
        ),
        knowledge_base=KnowledgeBase(exact_only=exact_only),
        exact_only=exact_only,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        spoonacular_api_key="spoon-key",
        admin_token="admin-token",
        cache_path=str(tmp_path / "nutrition_cache.json"),
    )


@pytest.fixture
def spoonacular_client() -> FakeSpoonacularClient:
    return FakeSpoonacularClient()


@pytest.fixture
def cache_storage() -> InMemoryCacheStorage:
    return InMemoryCacheStorage()


@pytest.fixture
def nutrition_service(
    spoonacular_client: FakeSpoonacularClient, cache_storage: InMemoryCacheStorage
) -> NutritionService:
    return build_service(spoonacular_client, cache_storage)


@pytest.fixture
def container(
    settings: Settings, nutrition_service: NutritionService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        close_resources=close_resources,
    )
