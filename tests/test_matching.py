"""Tests for name normalization and ingredient references."""

from nutrition_engine.domain.matching import (
    match_key,
    names_overlap,
    normalize_ingredients,
    normalize_name,
)


def test_normalize_name_folds_case_and_punctuation() -> None:
    assert normalize_name("  Kare-Kare! ") == "karekare"
    assert normalize_name("Lechon   Kawali") == "lechon kawali"


def test_match_key_prefers_exact_then_partial() -> None:
    keys = ["adobo", "chicken adobo special"]

    assert match_key("Chicken Adobo Special", keys) == "chicken adobo special"
    assert match_key("pork adobo", keys) == "adobo"
    assert match_key("pork adobo", keys, exact_only=True) is None
    assert match_key("", keys) is None


def test_names_overlap_in_either_direction() -> None:
    assert names_overlap("peanuts", "Peanut")
    assert names_overlap("Peanut", "peanuts")
    assert not names_overlap("peanuts", "Peanut", exact_only=True)
    assert not names_overlap("", "soy")


def test_normalize_ingredients_accepts_every_shape() -> None:
    refs = [
        " garlic ",
        {"name": "onion"},
        {"ingredientName": "soy sauce"},
        {"quantity": 2},
        "",
    ]

    assert normalize_ingredients(refs) == ["garlic", "onion", "soy sauce"]
    assert normalize_ingredients(None) == []
