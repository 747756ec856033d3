"""OpenAI text-to-speech provider implementation."""

import asyncio
import logging
import os

from openai import OpenAI

from ..tts.errors import (
    TTSAPIError,
    TTSAuthError,
    TTSModelError,
    TTSQuotaError,
    TTSRateLimitError,
)
from ..tts.models import VOICE_DESCRIPTIONS, Model, Voice, parse_model, parse_voice
from .base import TTSProvider

logger = logging.getLogger(__name__)

# Rough speaking rate used for duration estimates.
WORDS_PER_MINUTE = 150
CHARS_PER_WORD = 5


def _classify_error(e: Exception, model: str) -> TTSAPIError | TTSAuthError:
    """Map an OpenAI client exception onto the TTS error taxonomy."""
    message = str(e)
    lowered = message.lower()
    status = getattr(e, "status_code", None)

    if status == 401 or "invalid_api_key" in lowered or "incorrect api key" in lowered:
        return TTSAuthError(
            "Invalid OpenAI API key. Check OPENAI_API_KEY and try again.", e
        )
    if "insufficient_quota" in lowered:
        return TTSQuotaError(
            "OpenAI API quota exceeded. Please check your billing.", status, e
        )
    if status == 429 or "rate_limit_exceeded" in lowered:
        return TTSRateLimitError(
            "OpenAI API rate limit exceeded. Please wait and try again.", 429, e
        )
    if "model_not_found" in lowered:
        return TTSModelError(
            f'TTS model "{model}" not available. Try "tts-1" or "tts-1-hd".',
            status,
            e,
        )
    if status is not None and status >= 500:
        return TTSAPIError(f"Server error: {message}", status, e)
    return TTSAPIError(f"TTS generation failed: {message}", status, e)


class OpenAIProvider(TTSProvider):
    """OpenAI TTS provider implementation.

    Wraps the synchronous OpenAI client; requests run in a worker thread
    so the event loop is never blocked. Failed requests are not retried.
    """

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If not provided, reads from
                    OPENAI_API_KEY environment variable.

        Raises:
            TTSAuthError: If API key is not provided or the client fails to start.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise TTSAuthError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment "
                "variable or provide api_key parameter."
            )

        try:
            self._client = OpenAI(api_key=self._api_key, max_retries=0)
        except Exception as e:
            raise TTSAuthError(f"Failed to initialize OpenAI client: {e}", e) from e

        logger.debug("OpenAI TTS client initialized")

    async def synthesize(
        self,
        text: str,
        voice: str = Voice.ALLOY.value,
        model: str = Model.TTS_1.value,
    ) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            text: Text to convert to speech
            voice: Voice name (alloy, echo, fable, onyx, nova, shimmer)
            model: Model name (tts-1, tts-1-hd)

        Returns:
            Audio data as bytes (MP3 format)

        Raises:
            TTSAuthError: If the API key is rejected
            TTSRateLimitError: If the rate limit is exceeded
            TTSQuotaError: If the account quota is exhausted
            TTSModelError: If the model is not available
            TTSAPIError: If the API call fails for any other reason
            ValueError: If text is empty or voice/model are unknown
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        voice_name = parse_voice(voice).value
        model_name = parse_model(model).value

        logger.info(
            f"Generating speech with OpenAI TTS ({model_name}/{voice_name}, "
            f"{len(text)} chars)"
        )

        def _sync_create() -> bytes:
            response = self._client.audio.speech.create(
                model=model_name,
                voice=voice_name,
                input=text,
                response_format="mp3",
                speed=1.0,
            )
            return response.content

        try:
            audio_bytes = await asyncio.to_thread(_sync_create)
        except Exception as e:
            logger.error(f"Failed to generate speech: {e}")
            raise _classify_error(e, model_name) from e

        if not audio_bytes:
            raise TTSAPIError("Empty response from OpenAI TTS API")

        logger.info(f"Speech generation completed ({len(audio_bytes)} bytes)")
        return audio_bytes

    async def list_voices(self) -> list[dict]:
        """Return the fixed set of OpenAI voices."""
        return [
            {
                "id": voice.value,
                "name": f"{voice.value.capitalize()} ({VOICE_DESCRIPTIONS[voice]})",
                "provider": "openai",
            }
            for voice in Voice
        ]

    async def validate_api_key(self) -> bool:
        """Check the API key with a minimal synthesis request.

        Returns:
            True if the request succeeded, False otherwise
        """
        try:
            await self.synthesize("test", Voice.ALLOY.value, Model.TTS_1.value)
        except Exception as e:
            logger.warning(f"API key validation failed: {e}")
            return False
        return True

    @staticmethod
    def estimate_duration(text: str) -> int:
        """Estimate spoken duration of text in whole seconds (at least 1)."""
        words = len(text) / CHARS_PER_WORD
        seconds = words / WORDS_PER_MINUTE * 60
        return max(1, round(seconds))
