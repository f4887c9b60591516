"""Aggregate nutrition across dishes and against daily targets."""

from collections.abc import Iterable
from dataclasses import fields

from nutrition_engine.domain.nutrition import NutritionProfile, NutritionValues

DAILY_TARGETS = {
    "protein": 50,
    "carbs": 300,
    "fat": 65,
    "fiber": 25,
    "sodium": 2300,
}


def calculate_total_nutrition(profiles: Iterable[NutritionProfile]) -> NutritionValues:
    """Sum nutrition values, counting missing optional nutrients as zero."""
    names = [item.name for item in fields(NutritionValues)]
    totals = dict.fromkeys(names, 0.0)
    for profile in profiles:
        for name in names:
            totals[name] += getattr(profile.nutrition, name) or 0
    return NutritionValues(**totals)


def daily_percentages(
    values: NutritionValues, target_calories: float = 2000
) -> dict[str, int]:
    """Express values as whole percentages of daily targets."""
    percentages = {"calories": round(values.calories / target_calories * 100)}
    for name, target in DAILY_TARGETS.items():
        amount = getattr(values, name) or 0
        percentages[name] = round(amount / target * 100)
    return percentages
