"""Interface every speech synthesis backend implements."""

from abc import ABC, abstractmethod


class TTSProvider(ABC):
    """A backend that turns (text, voice, model) into MP3 bytes.

    The cache keys audio on exactly these three arguments, so an
    implementation must return the same kind of audio for the same
    request. Entries from ``list_voices()`` are dicts with ``id`` (the
    value passed as ``voice``), ``name`` (label shown by
    ``talktome say --list-voices``) and ``provider``.
    """

    @abstractmethod
    async def synthesize(self, text: str, voice: str, model: str) -> bytes:
        """Synthesize speech.

        Args:
            text: Text to speak
            voice: Voice id
            model: Model id

        Returns:
            MP3 audio bytes

        Raises:
            TTSError: If the backend fails
        """

    @abstractmethod
    async def list_voices(self) -> list[dict]:
        """Voices this backend accepts for ``synthesize``."""
