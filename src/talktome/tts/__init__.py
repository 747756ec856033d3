"""TTS (Text-to-Speech) package for talktome.

Holds the voice/model vocabulary and the error taxonomy raised by
speech synthesis providers.
"""

from .errors import (
    TTSAPIError,
    TTSAuthError,
    TTSError,
    TTSModelError,
    TTSQuotaError,
    TTSRateLimitError,
)
from .models import Model, Voice, parse_model, parse_voice

__all__ = [
    "Model",
    "TTSAPIError",
    "TTSAuthError",
    "TTSError",
    "TTSModelError",
    "TTSQuotaError",
    "TTSRateLimitError",
    "Voice",
    "parse_model",
    "parse_voice",
]
