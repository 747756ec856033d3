"""TTS vocabulary shared by the cache and the synthesis providers."""

from enum import Enum


class Voice(str, Enum):
    """Voices offered by the OpenAI speech endpoint."""

    ALLOY = "alloy"
    ECHO = "echo"
    FABLE = "fable"
    ONYX = "onyx"
    NOVA = "nova"
    SHIMMER = "shimmer"

    def __str__(self) -> str:
        return self.value


class Model(str, Enum):
    """Speech synthesis models."""

    TTS_1 = "tts-1"
    TTS_1_HD = "tts-1-hd"

    def __str__(self) -> str:
        return self.value


VOICE_DESCRIPTIONS = {
    Voice.ALLOY: "Neutral, balanced",
    Voice.ECHO: "Male, clear",
    Voice.FABLE: "Expressive, dramatic",
    Voice.ONYX: "Deep, authoritative",
    Voice.NOVA: "Young, energetic",
    Voice.SHIMMER: "Sweet, melodious",
}


def parse_voice(value: "Voice | str") -> Voice:
    """Convert a voice name to a Voice.

    Raises:
        ValueError: If the name is not a known voice
    """
    try:
        return Voice(value)
    except ValueError:
        valid = ", ".join(v.value for v in Voice)
        raise ValueError(f"Unknown voice '{value}'. Valid voices: {valid}") from None


def parse_model(value: "Model | str") -> Model:
    """Convert a model name to a Model.

    Raises:
        ValueError: If the name is not a known model
    """
    try:
        return Model(value)
    except ValueError:
        valid = ", ".join(m.value for m in Model)
        raise ValueError(f"Unknown model '{value}'. Valid models: {valid}") from None
