"""Nutrition domain models."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import StrEnum


class SpiceLevel(StrEnum):
    """Spice level of a dish."""

    MILD = "mild"
    MEDIUM = "medium"
    SPICY = "spicy"
    VERY_SPICY = "very_spicy"


class ProfileSource(StrEnum):
    """Where a nutrition profile came from."""

    PROVIDER = "provider"
    CURATED = "curated"
    ESTIMATED = "estimated"


@dataclass(frozen=True)
class NutritionValues:
    """Nutrient amounts for one serving."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None = None
    sodium: float | None = None
    sugar: float | None = None
    calcium: float | None = None
    iron: float | None = None
    vitamin_c: float | None = None


@dataclass(frozen=True)
class NutritionProfile:
    """Resolved nutrition, allergen, spice and dietary record for a dish."""

    id: str
    name: str
    nutrition: NutritionValues
    allergens: tuple[str, ...] = ()
    spice_level: SpiceLevel = SpiceLevel.MILD
    dietary_tags: tuple[str, ...] = ()
    serving_size: str = "1 serving"
    last_updated: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    source: ProfileSource = ProfileSource.ESTIMATED

    @property
    def is_placeholder(self) -> bool:
        """Return True when the profile carries no usable calorie data."""
        return self.nutrition.calories <= 0


@dataclass(frozen=True)
class CacheEntry:
    """A cached profile and the normalized key it is stored under."""

    key: str
    profile: NutritionProfile


@dataclass(frozen=True)
class AllergenProfile:
    """A user's declared allergens with optional severities."""

    selected_allergens: tuple[str, ...]
    severities: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CompatibilityResult:
    """Outcome of checking a profile against a user's allergens."""

    is_safe: bool
    conflicting_allergens: tuple[str, ...]
    warnings: tuple[str, ...]
    safety_level: str = "safe"


@dataclass(frozen=True)
class SearchCriteria:
    """Filters for searching the curated dish table."""

    spice_level: SpiceLevel | None = None
    allergen_free: tuple[str, ...] = ()
    max_calories: float | None = None
    dietary_tags: tuple[str, ...] = ()


def unique(values: Iterable[str]) -> tuple[str, ...]:
    """Drop duplicates while keeping first-seen order."""
    return tuple(dict.fromkeys(values))


def profile_to_record(profile: NutritionProfile) -> dict[str, object]:
    """Serialize a profile into a JSON-compatible dict."""
    return {
        "id": profile.id,
        "name": profile.name,
        "nutrition": {
            item.name: getattr(profile.nutrition, item.name)
            for item in fields(NutritionValues)
        },
        "allergens": list(profile.allergens),
        "spiceLevel": profile.spice_level.value,
        "dietaryTags": list(profile.dietary_tags),
        "servingSize": profile.serving_size,
        "lastUpdated": profile.last_updated.isoformat(),
        "source": profile.source.value,
    }


def profile_from_record(record: Mapping[str, object]) -> NutritionProfile:
    """Rebuild a profile from its serialized form.

    Raises ValueError when the record or its nutrition block is not a mapping.
    """
    if not isinstance(record, Mapping):
        raise ValueError(
            f"Profile record must be a mapping, got {type(record).__name__}"
        )
    nutrition = record.get("nutrition") or {}
    if not isinstance(nutrition, Mapping):
        raise ValueError("Profile nutrition must be a mapping")
    known = {item.name for item in fields(NutritionValues)}
    values = NutritionValues(
        **{
            "calories": 0,
            "protein": 0,
            "carbs": 0,
            "fat": 0,
            **{key: value for key, value in nutrition.items() if key in known},
        }
    )
    last_updated = record.get("lastUpdated")
    return NutritionProfile(
        id=str(record["id"]),
        name=str(record["name"]),
        nutrition=values,
        allergens=tuple(record.get("allergens") or ()),
        spice_level=SpiceLevel(record.get("spiceLevel") or SpiceLevel.MILD),
        dietary_tags=tuple(record.get("dietaryTags") or ()),
        serving_size=str(record.get("servingSize", "1 serving")),
        last_updated=(
            datetime.fromisoformat(last_updated)
            if isinstance(last_updated, str)
            else datetime.now(tz=UTC)
        ),
        source=ProfileSource(record.get("source") or ProfileSource.ESTIMATED),
    )
