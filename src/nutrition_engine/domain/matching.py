"""Name normalization and matching policy shared by lookups."""

import re
from collections.abc import Iterable, Mapping

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

IngredientRef = str | Mapping[str, object]


def normalize_name(name: str) -> str:
    """Lowercase a name, strip punctuation and collapse whitespace."""
    stripped = _NON_WORD.sub("", name.lower())
    return _WHITESPACE.sub(" ", stripped).strip()


def slugify(name: str) -> str:
    """Return a stable identifier fragment for a name."""
    return normalize_name(name).replace(" ", "_")


def names_overlap(left: str, right: str, *, exact_only: bool = False) -> bool:
    """Return True when either lower-cased string contains the other."""
    left_lower = left.lower()
    right_lower = right.lower()
    if exact_only:
        return left_lower == right_lower
    if not left_lower or not right_lower:
        return left_lower == right_lower
    return left_lower in right_lower or right_lower in left_lower


def match_key(
    name: str, keys: Iterable[str], *, exact_only: bool = False
) -> str | None:
    """Find the key matching a name: exact first, then bidirectional substring.

    Keys are compared in normalized form and iterated in the order given, so
    the first partial match wins when several keys could apply.
    """
    normalized = normalize_name(name)
    ordered = list(keys)
    for key in ordered:
        if normalize_name(key) == normalized:
            return key
    if exact_only or not normalized:
        return None
    for key in ordered:
        candidate = normalize_name(key)
        if candidate and (candidate in normalized or normalized in candidate):
            return key
    return None


def ingredient_name(ref: IngredientRef) -> str:
    """Reduce an ingredient reference to its plain name."""
    if isinstance(ref, str):
        return ref.strip()
    if isinstance(ref, Mapping):
        for field_name in ("name", "ingredientName"):
            value = ref.get(field_name)
            if isinstance(value, str):
                return value.strip()
    return ""


def normalize_ingredients(refs: Iterable[IngredientRef] | None) -> list[str]:
    """Normalize ingredient references into non-empty plain names."""
    if not refs:
        return []
    names = (ingredient_name(ref) for ref in refs)
    return [name for name in names if name]
