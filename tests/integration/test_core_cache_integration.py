"""Integration tests for speak_text with a real cache and a mocked provider."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from talktome.config import parse_config
from talktome.core import speak_text
from talktome.providers import ProviderRegistry
from talktome.tts.errors import TTSAuthError


class TestSpeakTextWithCache:
    """Test the full miss, store, hit cycle."""

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, tmp_path: Path) -> None:
        """Test that repeated phrases reuse the stored audio file."""
        cache_dir = tmp_path / "cache"
        config = parse_config({"cache": {"directory": str(cache_dir)}})
        provider = MagicMock()
        provider.synthesize = AsyncMock(return_value=b"ID3 synthesized")

        with patch.object(ProviderRegistry, "get", return_value=MagicMock(return_value=provider)):
            first = await speak_text("Tests passed", voice="echo", config=config, save_only=True)
            second = await speak_text("Tests passed", voice="echo", config=config, save_only=True)
            other = await speak_text("Tests passed", voice="fable", config=config, save_only=True)

        assert first.cached is False
        assert second.cached is True
        assert other.cached is False
        assert provider.synthesize.await_count == 2
        assert second.audio_path.read_bytes() == b"ID3 synthesized"

        index = json.loads((cache_dir / "metadata.json").read_text())
        assert sorted(entry["voice"] for entry in index.values()) == ["echo", "fable"]

    @pytest.mark.asyncio
    async def test_unknown_provider(self, tmp_path: Path) -> None:
        """Test that an invalid provider name raises KeyError."""
        config = parse_config({"cache": {"directory": str(tmp_path / "cache")}})

        with pytest.raises(KeyError, match="Provider 'invalid_provider' not found"):
            await speak_text(
                "Hello",
                provider="invalid_provider",
                config=config,
                save_only=True,
            )

    @pytest.mark.asyncio
    async def test_missing_api_key_reported(self, tmp_path: Path) -> None:
        """Test that a cache miss without OPENAI_API_KEY fails with TTSAuthError."""
        config = parse_config({"cache": {"directory": str(tmp_path / "cache")}})

        with pytest.raises(TTSAuthError, match="OpenAI API key not found"):
            await speak_text("Hello", config=config, save_only=True)
