"""Content-addressed cache manager for synthesized speech.

Orchestrates MetadataStore, BlobStore, and EvictionPolicy so repeated
requests for the same (text, voice, model) reuse an audio file instead
of calling the speech API again.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

from ..tts.models import Model, Voice, parse_voice
from . import get_cache_dir
from .blobs import BlobStore
from .eviction import (
    BYTES_PER_MB,
    DEFAULT_MAX_AGE_DAYS,
    DEFAULT_MAX_SIZE_MB,
    EvictionPolicy,
)
from .fingerprint import cache_key
from .metadata import MetadataStore
from .models import CacheEntry, CacheStats, utcnow

logger = logging.getLogger(__name__)


class CacheEngine:
    """Disk-backed audio cache keyed by request fingerprint.

    The engine is the only writer to both the metadata index and the
    audio files. Every public operation runs under an instance lock, so
    one engine may be shared between threads; separate processes sharing
    a directory are not coordinated (last index write wins).

    Example:
        cache = CacheEngine()

        audio_path = cache.lookup("Build finished", "nova", "tts-1")
        if audio_path is None:
            audio_bytes = await provider.synthesize("Build finished", "nova", "tts-1")
            audio_path = cache.store("Build finished", "nova", "tts-1", audio_bytes)
    """

    def __init__(
        self,
        cache_dir: str | Path | None = None,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
        max_age_days: float = DEFAULT_MAX_AGE_DAYS,
        extension: str = "mp3",
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the cache, load its index and drop expired entries.

        Args:
            cache_dir: Directory for audio files and metadata.json
                (defaults to ~/.cache/talktome)
            max_size_mb: Total size that triggers LRU eviction
            max_age_days: Age after which entries expire
            extension: File extension for cached audio
            clock: Returns the current time (timezone-aware)

        Raises:
            ValueError: If a limit is not positive
            OSError: If the cache directory cannot be created
        """
        self.cache_dir = Path(cache_dir).expanduser() if cache_dir else get_cache_dir()
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        self._clock = clock or utcnow
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

        self.metadata = MetadataStore(self.cache_dir)
        self.blobs = BlobStore(self.cache_dir, extension)
        self.policy = EvictionPolicy(
            max_size_bytes=int(max_size_mb * BYTES_PER_MB),
            max_age=timedelta(days=max_age_days),
        )

        with self._lock:
            self.metadata.load()
            self.cleanup_expired()

        logger.info(
            f"Cache manager initialized at {self.cache_dir} "
            f"with {len(self.metadata)} entries"
        )

    def key(self, text: str, voice: Voice | str, model: Model | str) -> str:
        """Cache key for a synthesis request."""
        return cache_key(text, voice, model)

    def lookup(
        self, text: str, voice: Voice | str, model: Model | str
    ) -> Path | None:
        """Return the cached audio path for a request, or None on a miss."""
        return self.get(self.key(text, voice, model))

    def get(self, key: str) -> Path | None:
        """Return the cached audio path for a key, or None on a miss.

        A hit refreshes the entry's last_accessed time. An entry whose
        audio file has disappeared is dropped and reported as a miss.
        """
        with self._lock:
            entry = self.metadata.get(key)
            if entry is None:
                self._misses += 1
                logger.debug(f"Cache miss: {key}")
                return None

            if not self.blobs.exists(entry.file_path):
                logger.warning(
                    f"Cache entry file missing, dropping entry: {entry.file_path}"
                )
                self.metadata.remove(key)
                self._misses += 1
                return None

            entry.last_accessed = max(self._clock(), entry.created_at)
            self.metadata.save()
            self._hits += 1

            logger.debug(f"Cache hit: {key} -> {entry.file_path}")
            return entry.file_path

    def store(
        self,
        text: str,
        voice: Voice | str,
        model: Model | str,
        data: bytes,
        custom_path: str | Path | None = None,
    ) -> Path:
        """Write audio for a request and record it in the index.

        An existing entry for the same key is replaced. A size sweep runs
        afterwards; the entry just written is never evicted by it.

        Args:
            text: Text that produced the audio
            voice: Voice used for synthesis
            model: Model used for synthesis
            data: Audio bytes
            custom_path: Optional destination instead of the cache directory

        Returns:
            Path of the stored audio file

        Raises:
            ValueError: If data is empty or voice/model are unknown
            OSError: If the audio file cannot be written
        """
        if not data:
            raise ValueError("No audio data provided")

        key = self.key(text, voice, model)

        with self._lock:
            try:
                path = self.blobs.write(key, data, custom_path)
            except OSError as e:
                logger.error(f"Failed to cache audio for {key}: {e}")
                raise

            previous = self.metadata.get(key)
            if (
                previous is not None
                and previous.file_path != path
                and previous.file_path == self.blobs.path_for(key)
            ):
                self.blobs.delete(previous.file_path)

            # The file at path now holds this key's audio
            for other in self.metadata.entries():
                if other.key != key and other.file_path == path:
                    logger.debug(f"Dropping entry {other.key} whose file was overwritten")
                    self.metadata.remove(other.key, persist=False)

            now = self._clock()
            entry = CacheEntry(
                key=key,
                file_path=path,
                created_at=now,
                last_accessed=now,
                size=len(data),
                text=text,
                voice=str(voice),
                model=str(model),
            )
            self.metadata.put(entry)

            logger.info(
                f"Audio cached: {path} ({len(data)} bytes, {entry.voice}/{entry.model})"
            )

            self.enforce_size_limit(protect=key)
            return path

    def entry(self, key: str) -> CacheEntry | None:
        """Index entry for a key, without touching last_accessed."""
        with self._lock:
            return self.metadata.get(key)

    def remove(self, key: str) -> bool:
        """Delete one entry and its audio file.

        Returns:
            True if the key was in the index
        """
        with self._lock:
            entry = self.metadata.get(key)
            if entry is None:
                return False

            self.blobs.delete(entry.file_path)
            self.metadata.remove(key)
            logger.debug(f"Cache entry deleted: {key}")
            return True

    def clear(self) -> None:
        """Delete every entry and every audio file in the cache directory.

        Audio saved to custom paths outside the cache directory is left
        in place; only its index entry is dropped.
        """
        with self._lock:
            for entry in self.metadata.entries():
                if entry.file_path.parent == self.cache_dir.absolute():
                    self.blobs.delete(entry.file_path)
            self.blobs.purge()
            self.metadata.clear()
            logger.info("Cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            entries = self.metadata.entries()
            created = [entry.created_at for entry in entries]
            return CacheStats(
                total_entries=len(entries),
                total_size=sum(entry.size for entry in entries),
                oldest_entry=min(created) if created else None,
                newest_entry=max(created) if created else None,
                hits=self._hits,
                misses=self._misses,
            )

    def find_by_text(self, text: str) -> list[CacheEntry]:
        """Entries whose text contains the given substring."""
        with self._lock:
            return [entry for entry in self.metadata if text in entry.text]

    def find_by_voice(self, voice: Voice | str) -> list[CacheEntry]:
        """Entries synthesized with the given voice.

        Voice names are matched case-insensitively.

        Raises:
            ValueError: If the name is not a known voice
        """
        voice_name = parse_voice(str(voice).strip().lower()).value
        with self._lock:
            return [entry for entry in self.metadata if entry.voice == voice_name]

    def cleanup_expired(self) -> int:
        """Delete entries older than the age limit.

        Returns:
            Number of entries removed
        """
        with self._lock:
            expired = self.policy.expired(self.metadata.entries(), self._clock())
            removed = self._evict(expired)

        if removed:
            logger.info(f"Cleaned up {removed} expired cache entries")
        return removed

    def enforce_size_limit(self, protect: str | None = None) -> int:
        """Evict least recently used entries once the size limit is exceeded.

        Args:
            protect: Key that must survive the sweep

        Returns:
            Number of entries removed
        """
        with self._lock:
            victims = self.policy.over_capacity(self.metadata.entries(), protect)
            removed = self._evict(victims)
            new_size = self.metadata.total_size()

        if removed:
            logger.info(
                f"Enforced storage limit: evicted {removed} entries, "
                f"cache size now {new_size} bytes"
            )
        return removed

    def set_max_size_mb(self, size_mb: float) -> None:
        with self._lock:
            self.policy.set_max_size_mb(size_mb)
        logger.info(f"Cache size limit updated to {size_mb} MB")

    def set_max_age_days(self, days: float) -> None:
        with self._lock:
            self.policy.set_max_age_days(days)
        logger.info(f"Cache age limit updated to {days} days")

    def flush(self) -> bool:
        """Persist the index (e.g. before shutdown)."""
        with self._lock:
            return self.metadata.save()

    def _evict(self, entries: list[CacheEntry]) -> int:
        # Caller holds the lock; the index is saved once per batch.
        for entry in entries:
            self.blobs.delete(entry.file_path)
            self.metadata.remove(entry.key, persist=False)

        if entries:
            self.metadata.save()
        return len(entries)
