"""High-level API for talktome library usage."""

from pathlib import Path

from .core import SpeechResult, speak_text


async def speak(
    text: str,
    voice: str | None = None,
    model: str | None = None,
    output: str | Path | None = None,
    cache: bool = True,
    save_only: bool = False,
) -> SpeechResult:
    """Synthesize speech from text.

    Args:
        text: Text to speak
        voice: Voice name (alloy, echo, fable, onyx, nova, shimmer)
        model: Model name (tts-1, tts-1-hd)
        output: File path to save audio to
        cache: Whether to reuse cached audio
        save_only: Save without playing

    Returns:
        SpeechResult with the audio path and whether it was cached

    Raises:
        TTSAuthError: If API key is not configured
        TTSAPIError: If TTS conversion fails
        RuntimeError: If audio playback fails
        OSError: If file save fails
        ValueError: If text is empty
    """
    return await speak_text(
        text=text,
        voice=voice,
        model=model,
        output_file=output,
        cache=cache,
        save_only=save_only,
    )
