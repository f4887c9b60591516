"""Keyword-based nutrition estimates for dishes with no authoritative data."""

from collections.abc import Sequence
from dataclasses import dataclass

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


@dataclass(frozen=True)
class _Bucket:
    keywords: tuple[str, ...]
    nutrition: NutritionValues
    allergens: tuple[str, ...] = ()


_BUCKETS: tuple[_Bucket, ...] = (
    _Bucket(
        keywords=("rice", "kanin"),
        nutrition=NutritionValues(130, 3, 28, 0, fiber=0.4, sodium=1),
    ),
    _Bucket(
        keywords=("pork", "baboy"),
        nutrition=NutritionValues(400, 25, 5, 30, fiber=1, sodium=650),
    ),
    _Bucket(
        keywords=("chicken", "manok"),
        nutrition=NutritionValues(300, 28, 0, 18, fiber=0, sodium=580),
    ),
    _Bucket(
        keywords=("fish", "isda"),
        nutrition=NutritionValues(250, 22, 0, 15, fiber=0, sodium=450),
        allergens=("fish",),
    ),
    _Bucket(
        keywords=("vegetable", "gulay"),
        nutrition=NutritionValues(50, 2, 10, 0, fiber=3, sodium=200),
    ),
    _Bucket(
        keywords=("noodle", "pancit"),
        nutrition=NutritionValues(280, 12, 45, 8, fiber=3, sodium=920),
        allergens=("gluten", "soy"),
    ),
)

DEFAULT_NUTRITION = NutritionValues(250, 15, 20, 12, fiber=2, sodium=600)
ESTIMATED_SERVING = "1 serving (estimated)"


def _bucket_for(dish_name: str) -> _Bucket | None:
    # "shellfish" must not land in the fish bucket
    name = dish_name.lower().replace("shellfish", "")
    for bucket in _BUCKETS:
        if any(keyword in name for keyword in bucket.keywords):
            return bucket
    return None


def estimate(dish_name: str) -> NutritionValues:
    """Estimate nutrition values from keywords in a dish name."""
    bucket = _bucket_for(dish_name)
    return bucket.nutrition if bucket else DEFAULT_NUTRITION


def estimate_profile(
    dish_name: str, ingredients: Sequence[str] = ()
) -> NutritionProfile:
    """Build a full estimated profile; tags come from the original name."""
    bucket = _bucket_for(dish_name)
    bucket_allergens = bucket.allergens if bucket else ()
    return NutritionProfile(
        id=f"estimated_{slugify(dish_name) or 'dish'}",
        name=dish_name.strip(),
        nutrition=estimate(dish_name),
        allergens=unique([*bucket_allergens, *infer_allergens(dish_name, ingredients)]),
        spice_level=infer_spice_level(dish_name),
        dietary_tags=infer_dietary_tags(dish_name, ingredients),
        serving_size=ESTIMATED_SERVING,
        source=ProfileSource.ESTIMATED,
    )
