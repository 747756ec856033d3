"""Age and size limits for the audio cache."""

from collections.abc import Iterable
from datetime import datetime, timedelta

from .models import CacheEntry

BYTES_PER_MB = 1024 * 1024
DEFAULT_MAX_SIZE_MB = 500
DEFAULT_MAX_AGE_DAYS = 30

# Size sweeps shrink the cache to this fraction of the limit.
DEFAULT_TARGET_RATIO = 0.8


class EvictionPolicy:
    """Selects cache entries to delete.

    The policy only chooses victims; CacheEngine performs the deletion
    so both sweeps share one removal path.

    Attributes:
        max_size_bytes: Total size that triggers a size sweep
        max_age: Entries older than this are expired
        target_ratio: Fraction of max_size_bytes a size sweep shrinks to
    """

    def __init__(
        self,
        max_size_bytes: int = DEFAULT_MAX_SIZE_MB * BYTES_PER_MB,
        max_age: timedelta = timedelta(days=DEFAULT_MAX_AGE_DAYS),
        target_ratio: float = DEFAULT_TARGET_RATIO,
    ):
        if max_size_bytes <= 0:
            raise ValueError(f"max_size_bytes must be positive, got {max_size_bytes}")
        if max_age <= timedelta(0):
            raise ValueError(f"max_age must be positive, got {max_age}")
        if not 0.0 < target_ratio <= 1.0:
            raise ValueError(
                f"target_ratio must be between 0.0 and 1.0, got {target_ratio}"
            )

        self.max_size_bytes = max_size_bytes
        self.max_age = max_age
        self.target_ratio = target_ratio

    @property
    def target_size(self) -> float:
        return self.max_size_bytes * self.target_ratio

    def set_max_size_mb(self, size_mb: float) -> None:
        if size_mb <= 0:
            raise ValueError(f"Cache size limit must be positive, got {size_mb}")
        self.max_size_bytes = int(size_mb * BYTES_PER_MB)

    def set_max_age_days(self, days: float) -> None:
        if days <= 0:
            raise ValueError(f"Cache age limit must be positive, got {days}")
        self.max_age = timedelta(days=days)

    def expired(self, entries: Iterable[CacheEntry], now: datetime) -> list[CacheEntry]:
        """Entries created longer than max_age before now."""
        return [entry for entry in entries if now - entry.created_at > self.max_age]

    def over_capacity(
        self, entries: Iterable[CacheEntry], protect: str | None = None
    ) -> list[CacheEntry]:
        """Least recently used entries to drop to get back under the target.

        Nothing is selected while the total stays within max_size_bytes.
        Once over, entries are taken oldest-access first until the
        remaining total is at or below target_size. sorted() is stable,
        so equal timestamps keep index order.

        Args:
            entries: Current index contents
            protect: Key that must never be selected (the entry just written)

        Returns:
            Entries to evict, in eviction order
        """
        entries = list(entries)
        total = sum(entry.size for entry in entries)
        if total <= self.max_size_bytes:
            return []

        victims = []
        for entry in sorted(entries, key=lambda e: e.last_accessed):
            if total <= self.target_size:
                break
            if entry.key == protect:
                continue
            victims.append(entry)
            total -= entry.size

        return victims
