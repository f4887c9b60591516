"""Keyword rules for allergens, spice level and dietary tags."""

from collections.abc import Iterable

from nutrition_engine.domain.nutrition import SpiceLevel, unique

ALLERGEN_KEYWORDS: dict[str, tuple[str, ...]] = {
    "eggs": ("egg", "itlog"),
    "dairy": ("milk", "cheese", "gatas", "butter", "cream"),
    "peanuts": ("peanut", "mani"),
    "tree nuts": ("tree nut", "almond", "walnut", "cashew"),
    "shellfish": ("shellfish", "shrimp", "hipon", "crab", "alimango", "prawn"),
    "fish": ("fish", "isda"),
    "soy": ("soy", "toyo", "tofu"),
    "sesame": ("sesame",),
    "gluten": ("wheat", "flour", "bread"),
}

SPICE_KEYWORDS: tuple[tuple[SpiceLevel, tuple[str, ...]], ...] = (
    (SpiceLevel.VERY_SPICY, ("bicol", "labuyo", "very spicy")),
    (SpiceLevel.SPICY, ("spicy", "maanghang", "chili")),
    (SpiceLevel.MEDIUM, ("medium", "slight")),
)

_PLANT_KEYWORDS = ("vegetable", "gulay", "salad")
_MEAT_KEYWORDS = ("meat", "pork", "baboy", "beef", "chicken", "manok", "dairy")
_ANIMAL_KEYWORDS = (
    *_MEAT_KEYWORDS,
    *ALLERGEN_KEYWORDS["eggs"],
    *ALLERGEN_KEYWORDS["dairy"],
    *ALLERGEN_KEYWORDS["fish"],
    *ALLERGEN_KEYWORDS["shellfish"],
)
_GLUTEN_KEYWORDS = ("wheat", "flour", "bread", "noodle")
_DAIRY_KEYWORDS = ALLERGEN_KEYWORDS["dairy"]


def _text(name: str, ingredients: Iterable[str]) -> str:
    return " ".join([name, *ingredients]).lower()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def infer_allergens(name: str, ingredients: Iterable[str] = ()) -> tuple[str, ...]:
    """Return canonical allergens suggested by a dish name and ingredients."""
    text = _text(name, ingredients)
    found: list[str] = []
    for allergen, keywords in ALLERGEN_KEYWORDS.items():
        if allergen == "fish":
            matched = _contains_any(text.replace("shellfish", ""), keywords)
        else:
            matched = _contains_any(text, keywords)
        if matched:
            found.append(allergen)
    return unique(found)


def infer_spice_level(name: str) -> SpiceLevel:
    """Return the most severe spice level named in a dish name."""
    text = name.lower()
    for level, keywords in SPICE_KEYWORDS:
        if _contains_any(text, keywords):
            return level
    return SpiceLevel.MILD


def infer_dietary_tags(name: str, ingredients: Iterable[str] = ()) -> tuple[str, ...]:
    """Return dietary tags, assuming each holds unless a keyword disproves it."""
    text = _text(name, ingredients)
    tags: list[str] = []
    if _contains_any(text, _PLANT_KEYWORDS) and not _contains_any(
        text, _ANIMAL_KEYWORDS
    ):
        tags.extend(["vegetarian", "vegan"])
    if not _contains_any(text, _GLUTEN_KEYWORDS):
        tags.append("gluten-free")
    if not _contains_any(text, _DAIRY_KEYWORDS):
        tags.append("dairy-free")
    return tuple(tags)
