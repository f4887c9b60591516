"""Durable cache of resolved nutrition profiles."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_engine.domain.matching import names_overlap, normalize_name
from nutrition_engine.domain.nutrition import (
    CacheEntry,
    NutritionProfile,
    profile_from_record,
    profile_to_record,
)

_logger = logging.getLogger(__name__)


class CacheStorage(Protocol):
    """Durable key-value storage for serialized profiles."""

    def load(self) -> dict[str, dict[str, object]]:
        """Return every stored record keyed by normalized dish name."""

    def save(self, records: dict[str, dict[str, object]]) -> None:
        """Persist the given records, replacing stored copies per key."""

    def clear(self) -> None:
        """Remove every stored record."""


@dataclass
class NullCacheStorage(CacheStorage):
    """Storage that keeps nothing; the cache lives only in memory."""

    def load(self) -> dict[str, dict[str, object]]:
        return {}

    def save(self, records: dict[str, dict[str, object]]) -> None:
        return None

    def clear(self) -> None:
        return None


@dataclass
class NutritionCache:
    """Profiles keyed by normalized dish name, written through to storage.

    Storage failures never propagate: a failed load starts the cache empty and
    a failed write or clear is logged and dropped.
    """

    storage: CacheStorage = field(default_factory=NullCacheStorage)
    entries: dict[str, CacheEntry] = field(default_factory=dict)
    exact_only: bool = False

    @classmethod
    def from_storage(
        cls, storage: CacheStorage, *, exact_only: bool = False
    ) -> "NutritionCache":
        """Create a cache populated from durable storage."""
        entries: dict[str, CacheEntry] = {}
        try:
            records = storage.load()
        except Exception:
            _logger.exception("Failed to load nutrition cache; starting empty")
            records = {}
        for key, record in records.items():
            try:
                entries[key] = CacheEntry(key=key, profile=profile_from_record(record))
            except (AttributeError, KeyError, TypeError, ValueError):
                _logger.warning("Skipping malformed cache record %r", key)
        return cls(storage=storage, entries=entries, exact_only=exact_only)

    def get(self, key: str) -> NutritionProfile | None:
        """Return the profile stored under an exact normalized key."""
        entry = self.entries.get(key)
        return entry.profile if entry else None

    def find(self, dish_name: str) -> NutritionProfile | None:
        """Find a confident profile by exact key, then by substring overlap."""
        key = normalize_name(dish_name)
        exact = self.get(key)
        if exact is not None and not exact.is_placeholder:
            return exact
        if self.exact_only or not key:
            return None
        for entry in list(self.entries.values()):
            if entry.profile.is_placeholder:
                continue
            if names_overlap(key, entry.key) or names_overlap(
                key, normalize_name(entry.profile.name)
            ):
                return entry.profile
        return None

    def put(self, key: str, profile: NutritionProfile) -> None:
        """Store a profile under a key and write it through to storage."""
        self.entries[key] = CacheEntry(key=key, profile=profile)
        self._save({key: profile_to_record(profile)})

    def flush(self) -> None:
        """Write every entry to durable storage."""
        self._save(self.records())

    def clear(self) -> None:
        """Drop every entry from memory and durable storage."""
        self.entries.clear()
        try:
            self.storage.clear()
        except Exception:
            _logger.exception("Failed to clear durable nutrition cache")

    def records(self) -> dict[str, dict[str, object]]:
        """Return the serialized form of every entry."""
        return {
            key: profile_to_record(entry.profile) for key, entry in self.entries.items()
        }

    def _save(self, records: dict[str, dict[str, object]]) -> None:
        try:
            self.storage.save(records)
        except Exception:
            _logger.exception("Failed to persist nutrition cache")
