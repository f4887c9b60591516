"""Tests for allergen compatibility checks."""

from nutrition_engine.domain.nutrition import (
    AllergenProfile,
    NutritionProfile,
    NutritionValues,
)
from nutrition_engine.services.compatibility import check_compatibility


def _profile(*allergens: str) -> NutritionProfile:
    return NutritionProfile(
        id="test",
        name="Test Dish",
        nutrition=NutritionValues(calories=300, protein=10, carbs=20, fat=10),
        allergens=allergens,
    )


def test_conflict_is_case_and_direction_insensitive() -> None:
    result = check_compatibility(_profile("peanuts"), ["Peanut"])

    assert result.is_safe is False
    assert set(result.conflicting_allergens) == {"peanuts"}
    assert result.warnings == (
        "Contains peanuts - may not be suitable due to your allergen profile",
    )
    assert result.safety_level == "caution"


def test_no_conflict_is_safe() -> None:
    result = check_compatibility(_profile("soy"), ["Shellfish"])

    assert result.is_safe is True
    assert result.conflicting_allergens == ()
    assert result.warnings == ()
    assert result.safety_level == "safe"


def test_warnings_follow_profile_allergen_order() -> None:
    result = check_compatibility(_profile("gluten", "soy", "eggs"), ["Eggs", "Soy"])

    assert result.conflicting_allergens == ("soy", "eggs")
    assert [warning.split()[1] for warning in result.warnings] == ["soy", "eggs"]


def test_severe_allergy_marks_danger() -> None:
    profile = AllergenProfile(
        selected_allergens=("Peanut", "Dairy"),
        severities={"Peanut": "severe"},
    )

    result = check_compatibility(_profile("peanuts", "dairy"), profile)

    assert result.safety_level == "danger"
    assert result.conflicting_allergens == ("peanuts", "dairy")


def test_exact_only_disables_substring_matching() -> None:
    result = check_compatibility(_profile("peanuts"), ["Peanut"], exact_only=True)

    assert result.is_safe is True
    assert check_compatibility(
        _profile("peanuts"), ["PEANUTS"], exact_only=True
    ).is_safe is False


def test_blank_user_allergens_never_conflict() -> None:
    assert check_compatibility(_profile("soy"), ["", "  "]).is_safe is True
    assert check_compatibility(_profile("soy"), []).is_safe is True
