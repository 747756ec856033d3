"""talktome - OpenAI text-to-speech with a content-addressed audio cache."""

__version__ = "0.1.0"
__all__ = ["CacheEngine", "speak"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "speak":
        from .api import speak

        return speak
    if name == "CacheEngine":
        from .cache.manager import CacheEngine

        return CacheEngine
    raise AttributeError(f"module 'talktome' has no attribute {name!r}")
