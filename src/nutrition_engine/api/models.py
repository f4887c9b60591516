"""Pydantic models for API payloads."""

from pydantic import BaseModel, Field

from nutrition_engine.domain.nutrition import SpiceLevel


class IngredientPayload(BaseModel):
    """Ingredient given as an object rather than a plain string."""

    name: str | None = None
    ingredientName: str | None = None  # noqa: N815

    def as_ref(self) -> dict[str, str]:
        """Return the ingredient as a plain mapping."""
        return self.model_dump(exclude_none=True)


class ResolveRequest(BaseModel):
    """Request to resolve a dish."""

    dish_name: str = Field(min_length=1)
    ingredients: list[str | IngredientPayload] | None = None

    def ingredient_refs(self) -> list[str | dict[str, str]] | None:
        """Return ingredients in the shape the resolver accepts."""
        if self.ingredients is None:
            return None
        return [
            item if isinstance(item, str) else item.as_ref()
            for item in self.ingredients
        ]


class CompatibilityRequest(ResolveRequest):
    """Request to resolve a dish and check it against allergens."""

    allergens: list[str] = Field(default_factory=list)
    severities: dict[str, str] = Field(default_factory=dict)


class SearchRequest(BaseModel):
    """Criteria for searching curated dishes."""

    spice_level: SpiceLevel | None = None
    allergen_free: list[str] = Field(default_factory=list)
    max_calories: float | None = Field(default=None, ge=0)
    dietary_tags: list[str] = Field(default_factory=list)


class TotalsRequest(BaseModel):
    """Request to total nutrition across dishes."""

    dish_names: list[str] = Field(min_length=1)
    target_calories: float = Field(default=2000, gt=0)
