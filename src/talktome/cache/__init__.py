"""Audio cache for talktome TTS requests."""

from pathlib import Path


def get_cache_dir() -> Path:
    """Get or create the talktome cache directory.

    Creates ~/.cache/talktome/ if it doesn't exist.

    Returns:
        Path to the cache directory
    """
    cache_dir = Path.home() / ".cache" / "talktome"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir
