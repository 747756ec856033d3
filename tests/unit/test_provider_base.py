"""Unit tests for TTSProvider abstract base class."""

import inspect

import pytest

from talktome.providers.base import TTSProvider


class TestTTSProviderAbstractClass:
    """Test TTSProvider abstract base class behavior."""

    def test_cannot_instantiate_abstract_class(self) -> None:
        """Test that TTSProvider cannot be instantiated directly."""
        with pytest.raises(TypeError) as exc_info:
            TTSProvider()  # type: ignore[abstract]

        error_msg = str(exc_info.value)
        assert "abstract" in error_msg.lower()
        assert "synthesize" in error_msg
        assert "list_voices" in error_msg

    def test_abstract_methods_defined(self) -> None:
        """Test that expected abstract methods are defined."""
        assert TTSProvider.__abstractmethods__ == {"synthesize", "list_voices"}

    def test_partial_implementation_fails(self) -> None:
        """Test that implementing only one abstract method still fails."""

        class PartialProvider(TTSProvider):
            async def synthesize(self, text: str, voice: str, model: str) -> bytes:
                return b"audio"

        with pytest.raises(TypeError) as exc_info:
            PartialProvider()  # type: ignore[abstract]

        assert "list_voices" in str(exc_info.value)

    def test_complete_implementation_succeeds(self) -> None:
        """Test that implementing all abstract methods allows instantiation."""

        class ConcreteProvider(TTSProvider):
            async def synthesize(self, text: str, voice: str, model: str) -> bytes:
                return b"audio data"

            async def list_voices(self) -> list[dict]:
                return [{"id": "test", "name": "Test Voice", "provider": "test"}]

        provider = ConcreteProvider()
        assert isinstance(provider, TTSProvider)

    def test_method_signatures(self) -> None:
        """Test that synthesize takes text, voice and model."""
        synthesize_sig = inspect.signature(TTSProvider.synthesize)
        list_voices_sig = inspect.signature(TTSProvider.list_voices)

        assert list(synthesize_sig.parameters) == ["self", "text", "voice", "model"]
        assert list(list_voices_sig.parameters) == ["self"]
        assert inspect.iscoroutinefunction(TTSProvider.synthesize)
        assert inspect.iscoroutinefunction(TTSProvider.list_voices)
