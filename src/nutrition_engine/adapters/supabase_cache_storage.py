"""Supabase storage for the nutrition cache."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_engine.services.cache import CacheStorage


@dataclass
class SupabaseCacheStorage(CacheStorage):
    """Supabase-backed storage for cached nutrition profiles."""

    client: Client
    table_name: str = "nutrition_cache"

    def load(self) -> dict[str, dict[str, object]]:
        """Return every stored profile keyed by normalized dish name."""
        response = self.client.table(self.table_name).select("*").execute()
        records: dict[str, dict[str, object]] = {}
        for row in response.data or []:
            profile = row.get("profile")
            if not isinstance(profile, dict):
                raise RuntimeError(f"Malformed cache row for key {row.get('key')!r}")
            records[str(row["key"])] = profile
        return records

    def save(self, records: dict[str, dict[str, object]]) -> None:
        """Upsert records by key."""
        if not records:
            return
        updated_at = datetime.now(tz=UTC).isoformat()
        rows = [
            {"key": key, "profile": profile, "updated_at": updated_at}
            for key, profile in records.items()
        ]
        self.client.table(self.table_name).upsert(rows, on_conflict="key").execute()

    def clear(self) -> None:
        """Delete every stored profile."""
        self.client.table(self.table_name).delete().not_.is_("key", "null").execute()
