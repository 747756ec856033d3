"""Data models for cache storage."""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 in UTC with a trailing Z."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class CacheEntry:
    """Cache entry describing one stored audio artifact.

    Attributes:
        key: SHA-256 fingerprint of (text, voice, model)
        file_path: Absolute path to the audio file
        created_at: When the artifact was written
        last_accessed: Most recent cache hit (or creation time)
        size: Byte length of the artifact as written
        text: Original input text for TTS
        voice: Voice name used for synthesis
        model: Model name used for synthesis
    """

    key: str
    file_path: Path
    created_at: datetime
    last_accessed: datetime
    size: int
    text: str
    voice: str
    model: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON form stored in metadata.json."""
        return {
            "filePath": str(self.file_path),
            "createdAt": format_timestamp(self.created_at),
            "lastAccessed": format_timestamp(self.last_accessed),
            "size": self.size,
            "text": self.text,
            "voice": self.voice,
            "model": self.model,
        }

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> "CacheEntry":
        """Build an entry from its metadata.json form.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field has the wrong type or format
            TypeError: If data is not a mapping
        """
        size = data["size"]
        if not isinstance(size, int) or isinstance(size, bool) or size < 0:
            raise ValueError(f"invalid size for entry {key}: {size!r}")

        created_at = parse_timestamp(data["createdAt"])
        last_accessed = parse_timestamp(data["lastAccessed"])
        if last_accessed < created_at:
            last_accessed = created_at

        return cls(
            key=key,
            file_path=Path(data["filePath"]),
            created_at=created_at,
            last_accessed=last_accessed,
            size=size,
            text=str(data["text"]),
            voice=str(data["voice"]),
            model=str(data["model"]),
        )


@dataclass
class CacheStats:
    """Snapshot of cache contents and in-process lookup counters."""

    total_entries: int
    total_size: int
    oldest_entry: datetime | None
    newest_entry: datetime | None
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Percentage of lookups served from cache."""
        lookups = self.hits + self.misses
        if lookups == 0:
            return 0.0
        return 100.0 * self.hits / lookups
