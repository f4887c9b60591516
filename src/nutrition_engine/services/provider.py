"""Nutrition lookups backed by the Spoonacular API."""

import asyncio
import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nutrition_engine.adapters.spoonacular_client import SpoonacularClient
from nutrition_engine.domain.matching import slugify
from nutrition_engine.domain.nutrition import (
    NutritionProfile,
    NutritionValues,
    ProfileSource,
    unique,
)
from nutrition_engine.services.tagging import (
    infer_allergens,
    infer_dietary_tags,
    infer_spice_level,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

# Field name -> nutrient name as reported by the provider.
_NUTRIENT_NAMES = {
    "protein": "Protein",
    "carbs": "Carbohydrates",
    "fat": "Fat",
    "fiber": "Fiber",
    "sodium": "Sodium",
    "sugar": "Sugar",
    "calcium": "Calcium",
    "iron": "Iron",
    "vitamin_c": "Vitamin C",
}

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

_FLAG_TAGS = (
    ("vegetarian", "vegetarian"),
    ("vegan", "vegan"),
    ("glutenFree", "gluten-free"),
    ("dairyFree", "dairy-free"),
    ("veryHealthy", "healthy"),
    ("cheap", "budget-friendly"),
)


@dataclass
class SpoonacularNutritionProvider:
    """Turns Spoonacular responses into nutrition profiles.

    Every public method returns ``None`` instead of raising: transport errors,
    empty result sets and payloads without usable calories are all misses.
    """

    client: SpoonacularClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup_dish(self, dish_name: str) -> NutritionProfile | None:
        """Search a dish by name and build a profile from the top recipe."""
        try:
            search = await self._call_with_retry(
                lambda: self.client.search_recipes(dish_name, number=1),
                action="search",
            )
            results = search.get("results") if isinstance(search, dict) else None
            if not results or not isinstance(results[0], dict):
                return None
            recipe = results[0]
            recipe_id = recipe.get("id")
            if recipe_id is None:
                return None
            widget = await self._call_with_retry(
                lambda: self.client.get_recipe_nutrition(int(recipe_id)),
                action=f"nutrition:{recipe_id}",
            )
        except Exception:
            _logger.warning("Provider lookup failed for %r", dish_name, exc_info=True)
            return None
        if not isinstance(widget, dict):
            return None
        profile = _recipe_profile(dish_name, recipe, widget)
        return None if profile.is_placeholder else profile

    async def analyze_ingredients(
        self, dish_name: str, ingredients: Sequence[str]
    ) -> NutritionProfile | None:
        """Sum provider nutrition across an ingredient list."""
        if not ingredients:
            return None
        try:
            parsed = await self._call_with_retry(
                lambda: self.client.parse_ingredients(ingredients),
                action="parse_ingredients",
            )
        except Exception:
            _logger.warning(
                "Provider ingredient analysis failed for %r", dish_name, exc_info=True
            )
            return None
        if not isinstance(parsed, list) or not parsed:
            return None
        profile = _ingredients_profile(dish_name, ingredients, parsed)
        return None if profile.is_placeholder else profile

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[object]]", *, action: str
    ) -> object:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Provider %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _round(value: float) -> int:
    """Round half up to a whole unit."""
    return int(math.floor(value + 0.5))


def _to_number(value: object) -> float:
    """Read a number from an int, float or a string such as ``"316k"``."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return max(float(value), 0.0)
    if isinstance(value, str):
        match = _NUMBER.search(value.replace(",", ""))
        if match:
            return max(float(match.group()), 0.0)
    return 0.0


def _find_nutrient(nutrients: list[object], name: str) -> float:
    """Find a nutrient amount by name, exact match first then substring."""
    target = name.lower()
    named = [
        item
        for item in nutrients
        if isinstance(item, dict) and isinstance(item.get("name"), str)
    ]
    for item in named:
        if item["name"].lower() == target:
            return _to_number(item.get("amount"))
    for item in named:
        if target in item["name"].lower():
            return _to_number(item.get("amount"))
    return 0.0


def _nutrient_list(payload: dict[str, object]) -> list[object]:
    nutrients = payload.get("nutrients")
    if nutrients is None and isinstance(payload.get("nutrition"), dict):
        nutrients = payload["nutrition"].get("nutrients")
    return nutrients if isinstance(nutrients, list) else []


def _extract_values(payload: dict[str, object]) -> dict[str, float]:
    """Map provider nutrients into raw values, unmatched fields as 0."""
    nutrients = _nutrient_list(payload)
    calories = _to_number(payload.get("calories")) or _find_nutrient(
        nutrients, "Calories"
    )
    values = {"calories": calories}
    for field_name, nutrient_name in _NUTRIENT_NAMES.items():
        values[field_name] = _find_nutrient(nutrients, nutrient_name)
    return values


def _values(raw: dict[str, float]) -> NutritionValues:
    return NutritionValues(**{key: _round(value) for key, value in raw.items()})


def _ingredient_names(recipe: dict[str, object]) -> list[str]:
    ingredients = recipe.get("extendedIngredients")
    if not isinstance(ingredients, list):
        return []
    return [
        item["name"]
        for item in ingredients
        if isinstance(item, dict) and isinstance(item.get("name"), str)
    ]


def _flag_allergens(recipe: dict[str, object]) -> list[str]:
    allergens = []
    if recipe.get("dairyFree") is False:
        allergens.append("dairy")
    if recipe.get("glutenFree") is False:
        allergens.append("gluten")
    return allergens


def _flag_tags(recipe: dict[str, object]) -> tuple[str, ...]:
    return tuple(tag for flag, tag in _FLAG_TAGS if recipe.get(flag) is True)


def _serving_size(recipe: dict[str, object]) -> str:
    servings = recipe.get("servings")
    if isinstance(servings, int) and servings > 0:
        return f"{servings} serving{'s' if servings != 1 else ''}"
    return "1 serving"


def _recipe_profile(
    dish_name: str, recipe: dict[str, object], widget: dict[str, object]
) -> NutritionProfile:
    ingredient_names = _ingredient_names(recipe)
    allergens = [*_flag_allergens(recipe), *infer_allergens("", ingredient_names)]
    return NutritionProfile(
        id=f"spoon_recipe_{recipe.get('id')}",
        name=dish_name.strip(),
        nutrition=_values(_extract_values(widget)),
        allergens=unique(allergens),
        spice_level=infer_spice_level(dish_name),
        dietary_tags=_flag_tags(recipe),
        serving_size=_serving_size(recipe),
        source=ProfileSource.PROVIDER,
    )


def _ingredients_profile(
    dish_name: str, ingredients: Sequence[str], parsed: list[object]
) -> NutritionProfile:
    totals: dict[str, float] = {}
    for item in parsed:
        if not isinstance(item, dict):
            continue
        for key, value in _extract_values(item).items():
            totals[key] = totals.get(key, 0.0) + value
    if not totals:
        totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0}
    return NutritionProfile(
        id=f"spoon_ingredients_{slugify(dish_name) or 'dish'}",
        name=dish_name.strip(),
        nutrition=_values(totals),
        allergens=infer_allergens(dish_name, ingredients),
        spice_level=infer_spice_level(dish_name),
        dietary_tags=infer_dietary_tags(dish_name, ingredients),
        serving_size="1 serving",
        source=ProfileSource.PROVIDER,
    )
