"""Spoonacular recipe and nutrition API client."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx


class SpoonacularClient(Protocol):
    """Interface for Spoonacular API interactions."""

    async def search_recipes(self, query: str, number: int = 1) -> dict[str, object]:
        """Search recipes by query and return raw API data."""

    async def get_recipe_nutrition(self, recipe_id: int) -> dict[str, object]:
        """Fetch the nutrient breakdown for a recipe."""

    async def parse_ingredients(
        self, ingredients: Sequence[str], servings: int = 1
    ) -> list[dict[str, object]]:
        """Parse ingredient lines and return them with nutrition."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 15
    ) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_recipes(self, query: str, number: int = 1) -> dict[str, object]:
        """Search recipes with full recipe information attached."""
        response = await self.http_client.get(
            f"{self.base_url}/recipes/complexSearch",
            params={
                "apiKey": self.api_key,
                "query": query,
                "number": number,
                "addRecipeInformation": "true",
                "fillIngredients": "true",
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def get_recipe_nutrition(self, recipe_id: int) -> dict[str, object]:
        """Fetch the nutrition widget data for a recipe."""
        response = await self.http_client.get(
            f"{self.base_url}/recipes/{recipe_id}/nutritionWidget.json",
            params={"apiKey": self.api_key},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def parse_ingredients(
        self, ingredients: Sequence[str], servings: int = 1
    ) -> list[dict[str, object]]:
        """Parse ingredient lines with nutrition included."""
        response = await self.http_client.post(
            f"{self.base_url}/recipes/parseIngredients",
            params={"apiKey": self.api_key},
            data={
                "ingredientList": "\n".join(ingredients),
                "servings": servings,
                "includeNutrition": "true",
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
