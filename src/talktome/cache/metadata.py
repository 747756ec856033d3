"""JSON-backed metadata index for the audio cache.

The whole index lives in memory and is rewritten to a single
metadata.json file after each mutation. Callers serialize mutations;
CacheEngine does this with its own lock.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from .models import CacheEntry

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"


class MetadataStore:
    """Authoritative key -> CacheEntry index mirrored to disk."""

    def __init__(self, cache_dir: Path):
        """Initialize the store for the given cache directory.

        Args:
            cache_dir: Directory holding metadata.json
        """
        self.cache_dir = cache_dir
        self.path = cache_dir / METADATA_FILENAME
        self._entries: dict[str, CacheEntry] = {}

    def load(self) -> None:
        """Read the persisted index, falling back to empty on any problem."""
        self._entries = {}

        if not self.path.exists():
            logger.debug(f"No cache metadata at {self.path}, starting empty")
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load cache metadata from {self.path}: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(
                f"Cache metadata at {self.path} is not a JSON object, starting empty"
            )
            return

        for key, value in data.items():
            try:
                self._entries[key] = CacheEntry.from_dict(key, value)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed cache entry {key}: {e!r}")

        logger.debug(f"Cache metadata loaded: {len(self._entries)} entries")

    def save(self) -> bool:
        """Rewrite the full index to disk.

        Returns:
            True if the index was persisted, False if the write failed
        """
        data = {key: entry.to_dict() for key, entry in self._entries.items()}

        tmp_path = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.cache_dir, prefix=".metadata-", suffix=".tmp"
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to save cache metadata to {self.path}: {e}")
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            return False

        logger.debug(f"Cache metadata saved ({len(data)} entries)")
        return True

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def put(self, entry: CacheEntry, persist: bool = True) -> None:
        """Insert or replace an entry."""
        self._entries[entry.key] = entry
        if persist:
            self.save()

    def remove(self, key: str, persist: bool = True) -> CacheEntry | None:
        """Remove an entry, returning it if it was present."""
        entry = self._entries.pop(key, None)
        if entry is not None and persist:
            self.save()
        return entry

    def clear(self) -> None:
        """Drop every entry and persist the empty index."""
        self._entries.clear()
        self.save()

    def entries(self) -> list[CacheEntry]:
        """All entries in insertion order."""
        return list(self._entries.values())

    def total_size(self) -> int:
        return sum(entry.size for entry in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CacheEntry]:
        return iter(list(self._entries.values()))
