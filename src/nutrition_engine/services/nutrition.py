"""Nutrition resolution across cache, provider, curated table and estimates."""

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nutrition_engine.domain.matching import (
    IngredientRef,
    normalize_ingredients,
    normalize_name,
)
from nutrition_engine.domain.nutrition import (
    AllergenProfile,
    CompatibilityResult,
    NutritionProfile,
    SearchCriteria,
)
from nutrition_engine.services.cache import NutritionCache
from nutrition_engine.services.compatibility import check_compatibility
from nutrition_engine.services.estimator import estimate_profile
from nutrition_engine.services.knowledge_base import KnowledgeBase
from nutrition_engine.services.provider import SpoonacularNutritionProvider

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    Attempt = Callable[[], Awaitable[NutritionProfile | None]]

_logger = logging.getLogger(__name__)

_RequestKey = tuple[str, tuple[str, ...]]


async def first_success(attempts: "Iterable[Attempt]") -> NutritionProfile | None:
    """Run attempts in order and return the first profile produced."""
    for attempt in attempts:
        profile = await attempt()
        if profile is not None:
            return profile
    return None


@dataclass
class NutritionService:
    """Resolves dish names into nutrition profiles with caching.

    Lookup order is cache, provider, curated table, then the keyword estimator,
    which always answers. Every resolution that misses the cache is written
    back under the normalized dish name.
    """

    provider: SpoonacularNutritionProvider | None
    cache: NutritionCache
    knowledge_base: KnowledgeBase = field(default_factory=KnowledgeBase)
    exact_only: bool = False
    debug: bool = False
    _in_flight: dict[_RequestKey, "asyncio.Future[NutritionProfile]"] = field(
        default_factory=dict, init=False, repr=False
    )

    async def resolve(
        self, dish_name: str, ingredients: Sequence[IngredientRef] | None = None
    ) -> NutritionProfile:
        """Return the best available profile for a dish; never raises."""
        names = normalize_ingredients(ingredients)
        cached = self.cache.find(dish_name)
        if cached is not None:
            if self.debug:
                _logger.info("Nutrition cache hit: dish=%s id=%s", dish_name, cached.id)
            return cached

        request_key = (dish_name.strip(), tuple(names))
        pending = self._in_flight.get(request_key)
        if pending is None:
            pending = asyncio.ensure_future(self._resolve_uncached(dish_name, names))
            self._in_flight[request_key] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(request_key, None))
        return await asyncio.shield(pending)

    def check_compatibility(
        self,
        profile: NutritionProfile,
        user_allergens: Iterable[str] | AllergenProfile,
        severities: Mapping[str, str] | None = None,
    ) -> CompatibilityResult:
        """Check a resolved profile against a user's allergens."""
        return check_compatibility(
            profile, user_allergens, severities, exact_only=self.exact_only
        )

    def search_dishes_by_criteria(self, criteria: SearchCriteria) -> list[str]:
        """Search the curated table only."""
        return self.knowledge_base.search(criteria)

    def list_known_dishes(self) -> list[str]:
        """Return curated dish names."""
        return self.knowledge_base.list_dishes()

    def clear_cache(self) -> None:
        """Empty the in-memory and durable cache."""
        self.cache.clear()
        _logger.info("Nutrition cache cleared")

    async def _resolve_uncached(
        self, dish_name: str, ingredients: list[str]
    ) -> NutritionProfile:
        try:
            profile = await first_success(
                [
                    lambda: self._from_provider(dish_name, ingredients),
                    lambda: self._from_knowledge_base(dish_name),
                ]
            )
        except Exception:
            _logger.exception("Nutrition lookup failed for %r", dish_name)
            profile = None
        if profile is None:
            profile = estimate_profile(dish_name, ingredients)
        self.cache.put(normalize_name(dish_name), profile)
        if self.debug:
            _logger.info(
                "Nutrition resolved: dish=%s source=%s id=%s",
                dish_name,
                profile.source,
                profile.id,
            )
        return profile

    async def _from_provider(
        self, dish_name: str, ingredients: list[str]
    ) -> NutritionProfile | None:
        if self.provider is None:
            return None
        if ingredients:
            return await self.provider.analyze_ingredients(dish_name, ingredients)
        return await self.provider.lookup_dish(dish_name)

    async def _from_knowledge_base(self, dish_name: str) -> NutritionProfile | None:
        return self.knowledge_base.lookup(dish_name)
