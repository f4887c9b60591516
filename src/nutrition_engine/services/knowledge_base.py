"""Curated table of known Filipino dishes."""

from dataclasses import dataclass, field

from nutrition_engine.domain.matching import match_key, names_overlap, slugify
from nutrition_engine.domain.nutrition import (
    NutritionProfile,
    NutritionValues,
    ProfileSource,
    SearchCriteria,
    SpiceLevel,
)


@dataclass(frozen=True)
class CuratedDish:
    """Authoritative metadata for a known dish."""

    nutrition: NutritionValues
    allergens: tuple[str, ...]
    spice_level: SpiceLevel
    dietary_tags: tuple[str, ...]
    serving_size: str


def _dish(  # noqa: PLR0913
    calories: float,
    protein: float,
    carbs: float,
    fat: float,
    fiber: float,
    sodium: float,
    sugar: float,
    calcium: float,
    iron: float,
    vitamin_c: float,
    *,
    allergens: tuple[str, ...] = (),
    spice_level: SpiceLevel = SpiceLevel.MILD,
    dietary_tags: tuple[str, ...] = (),
    serving_size: str,
) -> CuratedDish:
    return CuratedDish(
        nutrition=NutritionValues(
            calories=calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
            fiber=fiber,
            sodium=sodium,
            sugar=sugar,
            calcium=calcium,
            iron=iron,
            vitamin_c=vitamin_c,
        ),
        allergens=allergens,
        spice_level=spice_level,
        dietary_tags=dietary_tags,
        serving_size=serving_size,
    )


_GF = "gluten-free"
_DF = "dairy-free"

# fmt: off
CURATED_DISHES: dict[str, CuratedDish] = {
    "adobo": _dish(
        350, 25, 15, 22, 2, 890, 8, 35, 2.1, 12,
        allergens=("soy",), dietary_tags=(_GF,), serving_size="1 cup (250g)",
    ),
    "lechon kawali": _dish(
        480, 28, 8, 38, 0, 650, 2, 20, 1.8, 0,
        dietary_tags=(_GF, _DF), serving_size="150g",
    ),
    "sinigang na baboy": _dish(
        220, 18, 12, 12, 3, 1200, 6, 45, 1.5, 25,
        dietary_tags=(_GF, _DF), serving_size="1 bowl (300ml)",
    ),
    "bicol express": _dish(
        380, 20, 15, 28, 4, 750, 8, 120, 2.0, 45,
        allergens=("dairy",), spice_level=SpiceLevel.VERY_SPICY,
        dietary_tags=(_GF,), serving_size="1 cup (200g)",
    ),
    "kare-kare": _dish(
        420, 22, 25, 28, 5, 580, 12, 80, 2.8, 15,
        allergens=("peanuts",), dietary_tags=(_GF, _DF), serving_size="1 cup (250g)",
    ),
    "lumpia shanghai": _dish(
        180, 8, 20, 8, 2, 450, 3, 25, 1.2, 5,
        allergens=("eggs", "gluten"), serving_size="3 pieces (90g)",
    ),
    "pancit canton": _dish(
        280, 12, 45, 8, 3, 920, 6, 40, 2.5, 20,
        allergens=("gluten", "soy"), serving_size="1 cup (200g)",
    ),
    "sisig": _dish(
        450, 24, 12, 35, 2, 780, 4, 30, 3.2, 15,
        allergens=("eggs",), spice_level=SpiceLevel.MEDIUM,
        dietary_tags=(_GF,), serving_size="1 plate (200g)",
    ),
    "tinola": _dish(
        160, 15, 8, 8, 2, 650, 5, 35, 1.0, 30,
        dietary_tags=(_GF, _DF), serving_size="1 bowl (300ml)",
    ),
    "bulalo": _dish(
        280, 20, 10, 18, 3, 850, 6, 60, 2.2, 25,
        dietary_tags=(_GF, _DF), serving_size="1 bowl (400ml)",
    ),
    "laing": _dish(
        200, 8, 18, 12, 6, 420, 5, 180, 2.8, 20,
        allergens=("dairy",), spice_level=SpiceLevel.MEDIUM,
        dietary_tags=(_GF,), serving_size="1 cup (200g)",
    ),
    "pinakbet": _dish(
        120, 6, 15, 5, 5, 680, 8, 55, 1.8, 35,
        dietary_tags=("vegetarian", _GF, _DF), serving_size="1 cup (180g)",
    ),
    "fried rice": _dish(
        250, 8, 35, 10, 1, 780, 2, 25, 1.5, 8,
        allergens=("eggs", "soy"), serving_size="1 cup (200g)",
    ),
    "menudo": _dish(
        320, 18, 20, 20, 3, 720, 10, 40, 2.5, 25,
        dietary_tags=(_GF, _DF), serving_size="1 cup (200g)",
    ),
    "caldereta": _dish(
        380, 22, 18, 25, 4, 820, 12, 50, 2.8, 30,
        allergens=("dairy",), spice_level=SpiceLevel.MEDIUM,
        dietary_tags=(_GF,), serving_size="1 cup (220g)",
    ),
    "mechado": _dish(
        290, 20, 15, 18, 2, 680, 8, 35, 2.2, 20,
        dietary_tags=(_GF, _DF), serving_size="1 cup (200g)",
    ),
}
# fmt: on


@dataclass
class KnowledgeBase:
    """Lookup and search over the curated dish table."""

    dishes: dict[str, CuratedDish] = field(default_factory=lambda: CURATED_DISHES)
    exact_only: bool = False

    def lookup(self, dish_name: str) -> NutritionProfile | None:
        """Return the curated profile matching a dish name, if any."""
        key = match_key(dish_name, self.dishes, exact_only=self.exact_only)
        if key is None:
            return None
        partial = slugify(key) != slugify(dish_name)
        prefix = "curated_partial" if partial else "curated"
        dish = self.dishes[key]
        return NutritionProfile(
            id=f"{prefix}_{slugify(key)}",
            name=dish_name.strip(),
            nutrition=dish.nutrition,
            allergens=dish.allergens,
            spice_level=dish.spice_level,
            dietary_tags=dish.dietary_tags,
            serving_size=dish.serving_size,
            source=ProfileSource.CURATED,
        )

    def list_dishes(self) -> list[str]:
        """Return curated dish keys in declaration order."""
        return list(self.dishes)

    def search(self, criteria: SearchCriteria) -> list[str]:
        """Return curated dish keys satisfying every given criterion."""
        return [
            name
            for name, dish in self.dishes.items()
            if self._matches(dish, criteria)
        ]

    def _matches(self, dish: CuratedDish, criteria: SearchCriteria) -> bool:
        if criteria.spice_level and dish.spice_level != criteria.spice_level:
            return False
        if (
            criteria.max_calories is not None
            and dish.nutrition.calories > criteria.max_calories
        ):
            return False
        for avoided in criteria.allergen_free:
            if any(names_overlap(avoided, allergen) for allergen in dish.allergens):
                return False
        return all(tag.lower() in dish.dietary_tags for tag in criteria.dietary_tags)
