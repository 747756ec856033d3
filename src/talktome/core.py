"""Core functionality for talktome - orchestrates TTS, cache and audio."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from .audio.player import AudioPlayer
from .cache.manager import CacheEngine
from .config import TalkToMeConfig, load_config
from .providers import DEFAULT_PROVIDER, ProviderRegistry
from .tts.errors import TTSAPIError, TTSAuthError
from .tts.models import parse_model, parse_voice

logger = logging.getLogger(__name__)


@dataclass
class SpeechResult:
    """Outcome of a speak_text() call.

    Attributes:
        audio_path: Where the audio lives on disk (None if only played)
        cached: True if the audio came from the cache
        size: Audio size in bytes
    """

    audio_path: Path | None
    cached: bool
    size: int


async def list_available_voices(provider: str = DEFAULT_PROVIDER) -> None:
    """List all available voices from specified provider.

    Prints voices in "id: name" format to stdout.

    Raises:
        TTSAuthError: If API key is not configured
        TTSAPIError: If API call fails
        KeyError: If provider not found
    """
    try:
        provider_class = ProviderRegistry.get(provider)
        provider_instance = provider_class()
        voices = await provider_instance.list_voices()

        for voice in voices:
            print(f"{voice['id']}: {voice['name']}")

    except (TTSAuthError, TTSAPIError, KeyError):
        raise
    except Exception as e:
        raise TTSAPIError(f"Failed to list voices: {e}", None, e) from e


def open_cache(config: TalkToMeConfig) -> CacheEngine:
    """Create a CacheEngine from the cache section of the config."""
    return CacheEngine(
        cache_dir=config.cache.directory,
        max_size_mb=config.cache.max_size_mb,
        max_age_days=config.cache.max_age_days,
    )


async def speak_text(
    text: str,
    voice: str | None = None,
    model: str | None = None,
    output_file: str | Path | None = None,
    cache: bool = True,
    save_only: bool = False,
    provider: str = DEFAULT_PROVIDER,
    config: TalkToMeConfig | None = None,
) -> SpeechResult:
    """Convert text to speech, reusing cached audio when possible.

    Args:
        text: Text to convert to speech
        voice: Voice name (config default if omitted)
        model: Model name (config default if omitted)
        output_file: Optional path to save the audio to
        cache: Whether to use the audio cache
        save_only: Skip playback
        provider: Provider name to use for synthesis
        config: Configuration (loaded from disk if omitted)

    Returns:
        SpeechResult describing where the audio ended up

    Raises:
        TTSAuthError: If API key is not configured
        TTSAPIError: If TTS conversion fails
        RuntimeError: If audio playback fails
        OSError: If file save fails
        ValueError: If text is empty or voice/model are unknown
        KeyError: If provider not found
    """
    if not text or not text.strip():
        raise ValueError("Text cannot be empty")

    config = config or load_config()
    voice_name = parse_voice(voice or config.tts.voice).value
    model_name = parse_model(model or config.tts.model).value

    engine = None
    audio_path = None
    audio_data = None

    if cache:
        try:
            engine = await asyncio.to_thread(open_cache, config)
            audio_path = await asyncio.to_thread(
                engine.lookup, text, voice_name, model_name
            )
        except Exception as e:
            logger.warning(f"Cache unavailable ({e}), proceeding without cache")
            engine = None
            audio_path = None

    if audio_path is not None:
        logger.info(f"Using cached audio: {audio_path}")
        size = audio_path.stat().st_size
        if output_file and Path(output_file).absolute() != audio_path:
            audio_data = audio_path.read_bytes()
            AudioPlayer.save_to_file(audio_data, output_file)
            audio_path = Path(output_file).absolute()
        result = SpeechResult(audio_path=audio_path, cached=True, size=size)
    else:
        provider_instance = ProviderRegistry.get(provider)()
        audio_data = await provider_instance.synthesize(text, voice_name, model_name)

        if engine is not None:
            try:
                audio_path = await asyncio.to_thread(
                    engine.store, text, voice_name, model_name, audio_data, output_file
                )
            except OSError as e:
                logger.warning(f"Failed to cache audio: {e}. Continuing without caching.")

        if audio_path is None and output_file:
            AudioPlayer.save_to_file(audio_data, output_file)
            audio_path = Path(output_file).absolute()

        result = SpeechResult(audio_path=audio_path, cached=False, size=len(audio_data))

    if not save_only:
        player = AudioPlayer()
        if result.audio_path is not None:
            await player.play_file_async(result.audio_path)
        else:
            await player.play_bytes_async(audio_data)

    return result
