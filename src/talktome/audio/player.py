"""Speaker output for synthesized and cached speech, backed by pygame."""

# ruff: noqa: E402
import os

# Must be set before pygame is first imported
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import warnings

warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import asyncio
import io
import logging
from pathlib import Path

import pygame

logger = logging.getLogger(__name__)

# Polling rate while waiting for the mixer to finish a clip
POLL_HZ = 10


def _require_audio(audio_data: bytes) -> None:
    if not audio_data:
        raise ValueError("No audio data provided")


class AudioPlayer:
    """Plays MP3 clips from the cache directory or straight from memory.

    Cache hits are played by path so the file is streamed by the mixer;
    audio that was never written to disk is played from a BytesIO.
    Every play call blocks until the clip ends; use the ``*_async``
    variants from coroutines.
    """

    def __init__(self) -> None:
        """Open the pygame mixer.

        Raises:
            RuntimeError: If no audio device can be opened.
        """
        try:
            pygame.mixer.init()
        except pygame.error as e:
            raise RuntimeError(f"Failed to initialize pygame audio mixer: {e}") from e

    def _play_source(self, source: "io.BytesIO | str") -> None:
        music = pygame.mixer.music
        try:
            music.load(source)
            music.play()
            ticker = pygame.time.Clock()
            while music.get_busy():
                ticker.tick(POLL_HZ)
        except pygame.error as e:
            raise RuntimeError(f"Failed to play audio: {e}") from e

    def play_bytes(self, audio_data: bytes) -> None:
        """Play an in-memory MP3 clip.

        Raises:
            ValueError: If audio_data is empty.
            RuntimeError: If the mixer rejects or fails to play the clip.
        """
        _require_audio(audio_data)
        logger.debug(f"Playing {len(audio_data)} bytes from memory")
        self._play_source(io.BytesIO(audio_data))

    def play_file(self, filepath: str | Path) -> None:
        """Play an audio file, typically a cache entry.

        Raises:
            FileNotFoundError: If the file does not exist.
            RuntimeError: If the mixer rejects or fails to play the file.
        """
        path = Path(filepath)
        if not path.is_file():
            raise FileNotFoundError(f"Audio file not found: {path}")

        logger.debug(f"Playing {path}")
        self._play_source(str(path))

    async def play_file_async(self, filepath: str | Path) -> None:
        await asyncio.to_thread(self.play_file, filepath)

    async def play_bytes_async(self, audio_data: bytes) -> None:
        _require_audio(audio_data)
        await asyncio.to_thread(self.play_bytes, audio_data)

    @staticmethod
    def save_to_file(audio_data: bytes, filepath: str | Path) -> None:
        """Write a clip to an export path.

        Static so it can run on machines without an audio device.

        Raises:
            ValueError: If audio_data is empty.
            OSError: If the directory or file cannot be written.
        """
        _require_audio(audio_data)

        path = Path(filepath)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(audio_data)
        except OSError as e:
            raise OSError(f"Failed to save audio to {path}: {e}") from e
