"""JSON file storage for the nutrition cache."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from nutrition_engine.services.cache import CacheStorage

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileCacheStorage(CacheStorage):
    """Stores cache records as one JSON object on local disk."""

    path: Path

    def load(self) -> dict[str, dict[str, object]]:
        """Return stored records, or nothing when the file does not exist."""
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected cache file layout in {self.path}")
        return data

    def save(self, records: dict[str, dict[str, object]]) -> None:
        """Merge records into the file, replacing it atomically.

        An unreadable existing file is overwritten with the given records.
        """
        try:
            existing = self.load()
        except ValueError:
            _logger.warning("Overwriting unreadable cache file %s", self.path)
            existing = {}
        merged = {**existing, **records}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(merged, handle, ensure_ascii=False, indent=2)
            Path(tmp_name).replace(self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        """Delete the cache file."""
        self.path.unlink(missing_ok=True)
