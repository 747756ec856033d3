"""Deterministic cache keys for synthesis requests."""

import hashlib

from ..tts.models import Model, Voice, parse_model, parse_voice

KEY_SEPARATOR = ":"


def cache_key(text: str, voice: Voice | str, model: Model | str) -> str:
    """Generate the cache key for a (text, voice, model) request.

    Voice and model come from closed vocabularies that never contain the
    separator, so the joined string is unambiguous. Text is hashed as-is,
    without trimming or case folding.

    Args:
        text: Text to be spoken
        voice: Voice member or name
        model: Model member or name

    Returns:
        64-character lowercase SHA-256 hex digest

    Raises:
        ValueError: If text is None or voice/model are unknown
    """
    if text is None:
        raise ValueError("text must not be None")

    voice_name = parse_voice(voice).value
    model_name = parse_model(model).value

    content = KEY_SEPARATOR.join((text, voice_name, model_name))
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
