"""Allergen compatibility checks for resolved profiles."""

from collections.abc import Iterable, Mapping

from nutrition_engine.domain.matching import names_overlap
from nutrition_engine.domain.nutrition import (
    AllergenProfile,
    CompatibilityResult,
    NutritionProfile,
)

DEFAULT_SEVERITY = "moderate"


def _warning(allergen: str) -> str:
    return f"Contains {allergen} - may not be suitable due to your allergen profile"


def check_compatibility(
    profile: NutritionProfile,
    user_allergens: Iterable[str] | AllergenProfile,
    severities: Mapping[str, str] | None = None,
    *,
    exact_only: bool = False,
) -> CompatibilityResult:
    """Compare a profile's allergens with the user's declared allergens.

    Two names conflict when either contains the other, ignoring case, so
    "Peanut" flags "peanuts". With ``exact_only`` only equal names conflict.
    """
    if isinstance(user_allergens, AllergenProfile):
        severities = {**user_allergens.severities, **(severities or {})}
        user_allergens = user_allergens.selected_allergens
    declared = [allergen for allergen in user_allergens if allergen]
    severity_by_name = {
        name.lower(): level.lower() for name, level in (severities or {}).items()
    }

    conflicts: list[str] = []
    levels: list[str] = []
    for allergen in profile.allergens:
        matches = [
            user
            for user in declared
            if names_overlap(allergen, user, exact_only=exact_only)
        ]
        if not matches or allergen in conflicts:
            continue
        conflicts.append(allergen)
        levels.extend(
            severity_by_name.get(user.lower(), DEFAULT_SEVERITY) for user in matches
        )

    if not conflicts:
        safety_level = "safe"
    elif "severe" in levels:
        safety_level = "danger"
    else:
        safety_level = "caution"
    return CompatibilityResult(
        is_safe=not conflicts,
        conflicting_allergens=tuple(conflicts),
        warnings=tuple(_warning(allergen) for allergen in conflicts),
        safety_level=safety_level,
    )
