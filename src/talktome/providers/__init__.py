"""Speech synthesis backends, looked up by name.

``speak_text`` resolves its ``provider`` argument through
``ProviderRegistry``; OpenAI is registered under ``DEFAULT_PROVIDER``.
"""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .base import TTSProvider

from .openai import OpenAIProvider

__all__ = ["DEFAULT_PROVIDER", "OpenAIProvider", "ProviderRegistry"]

DEFAULT_PROVIDER = "openai"


class ProviderRegistry:
    """Name -> provider class mapping shared by the CLI and library API."""

    _providers: ClassVar[dict[str, type["TTSProvider"]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["TTSProvider"]) -> None:
        """Make a provider class selectable by name (replacing any previous one)."""
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type["TTSProvider"]:
        """Look up a provider class.

        Raises:
            KeyError: If nothing is registered under name; the message
                lists the registered names
        """
        try:
            return cls._providers[name]
        except KeyError:
            available = ", ".join(cls._providers) or "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            ) from None


ProviderRegistry.register(DEFAULT_PROVIDER, OpenAIProvider)
