"""Unit tests for CLI logic functions and commands."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from talktome.cache.manager import CacheEngine
from talktome.cli import app, format_size, process_text_input
from talktome.core import SpeechResult
from talktome.tts.errors import TTSAuthError

runner = CliRunner()


def test_process_text_input_with_valid_text() -> None:
    """Test that process_text_input returns text when provided."""
    assert process_text_input("Hello world") == "Hello world"


def test_process_text_input_with_whitespace() -> None:
    """Test that process_text_input preserves whitespace."""
    assert process_text_input("  Hello   world  ") == "  Hello   world  "


def test_process_text_input_with_multiline() -> None:
    """Test that process_text_input handles multiline text."""
    text = "Line 1\nLine 2\nLine 3"
    assert process_text_input(text) == text


def test_process_text_input_with_none_raises_value_error() -> None:
    """Test that process_text_input raises ValueError when text is None."""
    with pytest.raises(ValueError, match="No text provided"):
        process_text_input(None)


@pytest.mark.parametrize(
    "size,expected",
    [(0, "0.0 KB"), (1536, "1.5 KB"), (5 * 1024 * 1024, "5.00 MB")],
)
def test_format_size(size: int, expected: str) -> None:
    assert format_size(size) == expected


@pytest.fixture
def home_cache(tmp_path: Path) -> CacheEngine:
    """Cache at the default location the CLI opens."""
    return CacheEngine(tmp_path / "home" / ".cache" / "talktome")


class TestSayCommand:
    """Test the say command."""

    def test_say_reports_generated_audio(self, tmp_path: Path) -> None:
        result_obj = SpeechResult(audio_path=tmp_path / "a.mp3", cached=False, size=2048)
        with patch("talktome.cli.speak_text", new=AsyncMock(return_value=result_obj)) as mock:
            result = runner.invoke(app, ["say", "Hello", "--save-only", "-v", "nova"])

        assert result.exit_code == 0
        assert f"Audio generated: {tmp_path / 'a.mp3'} (2.0 KB)" in result.output
        assert mock.await_args.args == ("Hello",)
        assert mock.await_args.kwargs["voice"] == "nova"
        assert mock.await_args.kwargs["save_only"] is True
        assert mock.await_args.kwargs["cache"] is True

    def test_say_no_cache_flag(self) -> None:
        result_obj = SpeechResult(audio_path=None, cached=False, size=10)
        with patch("talktome.cli.speak_text", new=AsyncMock(return_value=result_obj)) as mock:
            result = runner.invoke(app, ["say", "Hello", "--no-cache"])

        assert result.exit_code == 0
        assert mock.await_args.kwargs["cache"] is False
        assert "Audio" not in result.output

    def test_say_reads_text_from_file(self, tmp_path: Path) -> None:
        text_file = tmp_path / "speech.txt"
        text_file.write_text("From a file")
        result_obj = SpeechResult(audio_path=None, cached=False, size=10)

        with patch("talktome.cli.speak_text", new=AsyncMock(return_value=result_obj)) as mock:
            result = runner.invoke(app, ["say", "-f", str(text_file)])

        assert result.exit_code == 0
        assert mock.await_args.args == ("From a file",)

    def test_say_reads_text_from_stdin(self) -> None:
        result_obj = SpeechResult(audio_path=None, cached=False, size=10)

        with patch("talktome.cli.speak_text", new=AsyncMock(return_value=result_obj)) as mock:
            result = runner.invoke(app, ["say"], input="Piped text\n")

        assert result.exit_code == 0
        assert mock.await_args.args == ("Piped text",)

    def test_say_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["say", "-f", str(tmp_path / "missing.txt")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_say_unreadable_file(self, tmp_path: Path) -> None:
        """Test that other read errors exit cleanly instead of crashing."""
        result = runner.invoke(app, ["say", "-f", str(tmp_path)])

        assert result.exit_code == 1
        assert "Failed to read file" in result.output
        assert "Traceback" not in result.output

    def test_say_empty_input_fails(self) -> None:
        result = runner.invoke(app, ["say"], input="")

        assert result.exit_code == 1
        assert "Error: Invalid input" in result.output

    def test_say_auth_error(self) -> None:
        """Test that a missing API key exits with status 1."""
        with patch(
            "talktome.cli.speak_text",
            new=AsyncMock(side_effect=TTSAuthError("OpenAI API key not found")),
        ):
            result = runner.invoke(app, ["say", "Hello"])

        assert result.exit_code == 1
        assert "Error: Authentication failed: OpenAI API key not found" in result.output

    def test_say_debug_shows_repr(self) -> None:
        with patch(
            "talktome.cli.speak_text",
            new=AsyncMock(side_effect=RuntimeError("no audio device")),
        ):
            result = runner.invoke(app, ["say", "Hello", "--debug"])

        assert result.exit_code == 1
        assert "Debug - Failed to play audio: RuntimeError('no audio device')" in result.output


class TestCacheCommands:
    """Test cache subcommands."""

    def test_stats_empty(self) -> None:
        result = runner.invoke(app, ["cache", "stats"])

        assert result.exit_code == 0
        assert "Total entries: 0" in result.output
        assert "Oldest entry: N/A" in result.output

    def test_stats_with_entries(self, home_cache: CacheEngine) -> None:
        home_cache.store("Hello", "alloy", "tts-1", b"x" * 2048)

        result = runner.invoke(app, ["cache", "stats"])

        assert "Total entries: 1" in result.output
        assert "Total size: 2.0 KB" in result.output

    def test_find_requires_filter(self) -> None:
        result = runner.invoke(app, ["cache", "find"])

        assert result.exit_code == 1
        assert "--text or --voice" in result.output

    def test_find_by_text_and_voice(self, home_cache: CacheEngine) -> None:
        home_cache.store("Build finished", "alloy", "tts-1", b"x")
        home_cache.store("Build started", "nova", "tts-1", b"x")

        by_text = runner.invoke(app, ["cache", "find", "-t", "Build"])
        by_voice = runner.invoke(app, ["cache", "find", "-v", "nova"])
        both = runner.invoke(app, ["cache", "find", "-t", "finished", "-v", "nova"])

        assert "Found 2 matching entries" in by_text.output
        assert "Found 1 matching entries" in by_voice.output
        assert 'Text: "Build started"' in by_voice.output
        assert "No matching entries found." in both.output

    def test_find_voice_case_insensitive(self, home_cache: CacheEngine) -> None:
        home_cache.store("Build started", "nova", "tts-1", b"x")

        by_voice = runner.invoke(app, ["cache", "find", "-v", "Nova"])
        both = runner.invoke(app, ["cache", "find", "-t", "started", "-v", "NOVA"])

        assert "Found 1 matching entries" in by_voice.output
        assert "Found 1 matching entries" in both.output

    def test_find_unknown_voice(self, home_cache: CacheEngine) -> None:
        """Test that an unknown voice is reported instead of matching nothing."""
        home_cache.store("Build started", "nova", "tts-1", b"x")

        result = runner.invoke(app, ["cache", "find", "-v", "rachel"])

        assert result.exit_code == 1
        assert "Unknown voice" in result.output

    def test_clear_force(self, home_cache: CacheEngine) -> None:
        path = home_cache.store("Hello", "alloy", "tts-1", b"x")

        result = runner.invoke(app, ["cache", "clear", "--force"])

        assert result.exit_code == 0
        assert "Cache cleared." in result.output
        assert not path.exists()

    def test_clear_cancelled(self, home_cache: CacheEngine) -> None:
        path = home_cache.store("Hello", "alloy", "tts-1", b"x")

        result = runner.invoke(app, ["cache", "clear"], input="n\n")

        assert "Cache clear cancelled." in result.output
        assert path.exists()


class TestConfigCommands:
    """Test config subcommands."""

    def test_show(self) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Default voice: alloy" in result.output
        assert "not configured (set OPENAI_API_KEY)" in result.output

    def test_export(self, monkeypatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")

        result = runner.invoke(app, ["config", "export"])

        assert result.exit_code == 0
        assert "sk-secret" not in result.output
        payload = result.output[result.output.index("{") :]
        assert json.loads(payload)["has_api_key"] is True

    def test_reset(self, isolate_config: Path) -> None:
        result = runner.invoke(app, ["config", "reset"])

        assert result.exit_code == 0
        assert f"Configuration reset to defaults: {isolate_config}" in result.output
        assert isolate_config.exists()


class TestDoctorCommand:
    """Test the doctor command."""

    def test_doctor_without_api_key(self) -> None:
        result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 0
        assert "OpenAI API key: not configured" in result.output
        assert "Entries: 0" in result.output
        assert "Recommendation: export OPENAI_API_KEY" in result.output

    def test_doctor_validates_key(self, monkeypatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("talktome.cli.OpenAIProvider") as mock_provider_class:
            mock_provider_class.return_value.validate_api_key = AsyncMock(return_value=False)
            result = runner.invoke(app, ["doctor"])

        assert "API key validation: invalid" in result.output


class TestServeCommand:
    """Test the MCP serve command."""

    def test_serve_without_api_key(self) -> None:
        with patch("talktome.cli.create_server") as mock_create:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY is not set" in result.output
        mock_create.assert_not_called()

    def test_serve_runs_server(self, monkeypatch) -> None:
        """Test that serve builds the server from config and runs it."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("talktome.cli.create_server") as mock_create:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0
        mock_create.assert_called_once()
        assert mock_create.call_args.args[0].tts.voice == "alloy"
        mock_create.return_value.run.assert_called_once_with()
