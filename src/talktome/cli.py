"""Typer CLI definition for talktome."""

import asyncio
import logging
import platform
import sys
from pathlib import Path
from typing import NoReturn

import typer

from .config import (
    TalkToMeConfig,
    config_summary,
    export_config,
    load_config,
    reset_config,
)
from .core import list_available_voices, open_cache, speak_text
from .providers import OpenAIProvider
from .server import create_server
from .tts.errors import TTSAPIError, TTSAuthError
from .tts.models import parse_voice

app = typer.Typer(help="Convert text to speech with OpenAI voices and cache the audio")
cache_app = typer.Typer(help="Inspect and manage the audio cache")
config_app = typer.Typer(help="Configuration management")
app.add_typer(cache_app, name="cache")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PLAYBACK_SUPPORT = {
    "Darwin": "pygame mixer (CoreAudio)",
    "Linux": "pygame mixer (ALSA/PulseAudio, check an output device exists)",
    "Windows": "pygame mixer (DirectSound/WASAPI)",
}


def configure_logging(config: TalkToMeConfig, debug: bool = False) -> None:
    """Send log records to stderr at the configured level."""
    level = logging.DEBUG if debug else getattr(logging, config.logging.level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def process_text_input(text: str | None) -> str:
    """Process text input and return the text to speak.

    Args:
        text: Optional text input from CLI argument

    Returns:
        The text to speak

    Raises:
        ValueError: If no text is provided
    """
    if text is None:
        raise ValueError("No text provided")

    return text


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def _fail(message: str, error: Exception, debug: bool) -> NoReturn:
    if debug:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {message}: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def say(
    text: str | None = typer.Argument(None, help="Text to convert to speech"),
    file: Path | None = typer.Option(None, "-f", "--file", help="Read text from file"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Save the audio to this path"
    ),
    voice: str | None = typer.Option(
        None, "-v", "--voice", help="Voice name (from config if omitted)"
    ),
    model: str | None = typer.Option(
        None, "-m", "--model", help="Model name: tts-1 or tts-1-hd"
    ),
    save_only: bool = typer.Option(
        False, "--save-only", help="Only save the audio file, do not play it"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the audio cache"),
    list_voices: bool = typer.Option(
        False, "--list-voices", help="List available voices and exit"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Show verbose error messages and cache activity"
    ),
) -> None:
    """Convert text to speech and play it."""
    config = load_config()
    configure_logging(config, debug)

    if list_voices:
        try:
            asyncio.run(list_available_voices())
        except Exception as e:
            _fail("Failed to list voices", e, debug)
        raise typer.Exit(0)

    # Get text from argument, file, or stdin (in priority order)
    if text is None:
        if file:
            try:
                text = file.read_text()
            except FileNotFoundError as e:
                _fail(f"File not found: {file}", e, debug)
            except PermissionError as e:
                _fail(f"Permission denied reading file: {file}", e, debug)
            except UnicodeDecodeError as e:
                _fail(f"Unable to decode file as text: {file}", e, debug)
            except OSError as e:
                _fail(f"Failed to read file: {file}", e, debug)
        elif not sys.stdin.isatty():
            text = sys.stdin.read().strip()

    try:
        speech_text = process_text_input(text)
    except ValueError as e:
        _fail("Invalid input", e, debug)

    try:
        result = asyncio.run(
            speak_text(
                speech_text,
                voice=voice,
                model=model,
                output_file=output,
                cache=config.cache.enabled and not no_cache,
                save_only=save_only,
                config=config,
            )
        )
    except TTSAuthError as e:
        _fail("Authentication failed", e, debug)
    except TTSAPIError as e:
        _fail("TTS request failed", e, debug)
    except OSError as e:
        _fail("Failed to save audio file", e, debug)
    except RuntimeError as e:
        _fail("Failed to play audio", e, debug)
    except ValueError as e:
        _fail("Invalid input", e, debug)
    except Exception as e:
        _fail("An unexpected error occurred", e, debug)

    if result.audio_path is not None:
        source = "cached" if result.cached else "generated"
        typer.echo(
            f"Audio {source}: {result.audio_path} ({format_size(result.size)})"
        )


@cache_app.command("stats")
def cache_stats() -> None:
    """Show cache statistics."""
    config = load_config()
    configure_logging(config)

    stats = open_cache(config).stats()
    oldest = stats.oldest_entry.strftime("%Y-%m-%d") if stats.oldest_entry else "N/A"
    newest = stats.newest_entry.strftime("%Y-%m-%d") if stats.newest_entry else "N/A"

    typer.echo("Cache Statistics:")
    typer.echo(f"  Total entries: {stats.total_entries}")
    typer.echo(f"  Total size: {format_size(stats.total_size)}")
    typer.echo(f"  Size limit: {config.cache.max_size_mb} MB")
    typer.echo(f"  Oldest entry: {oldest}")
    typer.echo(f"  Newest entry: {newest}")


@cache_app.command("clear")
def cache_clear(
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompt"),
) -> None:
    """Clear all cached audio files."""
    config = load_config()
    configure_logging(config)

    if not force and not typer.confirm(
        "Are you sure you want to clear all cached audio files?", default=False
    ):
        typer.echo("Cache clear cancelled.")
        raise typer.Exit(0)

    open_cache(config).clear()
    typer.echo("Cache cleared.")


@cache_app.command("find")
def cache_find(
    text: str | None = typer.Option(None, "-t", "--text", help="Search by text content"),
    voice: str | None = typer.Option(None, "-v", "--voice", help="Filter by voice"),
) -> None:
    """Find cached entries by text or voice."""
    if text is None and voice is None:
        typer.echo("Error: Please specify either --text or --voice", err=True)
        raise typer.Exit(1)

    config = load_config()
    configure_logging(config)
    engine = open_cache(config)

    voice_name = None
    try:
        if voice is not None:
            voice_name = parse_voice(voice.strip().lower()).value
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if text is not None:
        entries = engine.find_by_text(text)
    else:
        entries = engine.find_by_voice(voice_name)
    if voice_name is not None and text is not None:
        entries = [entry for entry in entries if entry.voice == voice_name]

    if not entries:
        typer.echo("No matching entries found.")
        return

    typer.echo(f"Found {len(entries)} matching entries:")
    for index, entry in enumerate(entries, 1):
        preview = entry.text[:50] + ("..." if len(entry.text) > 50 else "")
        typer.echo(f"  {index}. {entry.file_path.name}")
        typer.echo(f'     Text: "{preview}"')
        typer.echo(f"     Voice: {entry.voice}, Model: {entry.model}")
        typer.echo(f"     Size: {format_size(entry.size)}")
        typer.echo(f"     Created: {entry.created_at.strftime('%Y-%m-%d %H:%M')}")


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    summary = config_summary(load_config())

    typer.echo("Current Configuration:")
    typer.echo(
        f"  API key: {'configured' if summary['has_api_key'] else 'not configured (set OPENAI_API_KEY)'}"
    )
    typer.echo(f"  Default voice: {summary['default_voice']}")
    typer.echo(f"  Default model: {summary['default_model']}")
    typer.echo(f"  Cache enabled: {summary['cache_enabled']}")
    typer.echo(f"  Cache directory: {summary['cache_directory'] or '~/.cache/talktome'}")
    typer.echo(f"  Cache max size: {summary['cache_max_size_mb']} MB")
    typer.echo(f"  Cache duration: {summary['cache_max_age_days']} days")
    typer.echo(f"  Log level: {summary['log_level']}")
    typer.echo(f"  Config path: {summary['config_path']}")


@config_app.command("export")
def config_export() -> None:
    """Print the configuration as JSON (the API key itself is never included)."""
    typer.echo(export_config(load_config()))


@config_app.command("reset")
def config_reset() -> None:
    """Reset configuration to defaults."""
    path = reset_config()
    typer.echo(f"Configuration reset to defaults: {path}")


@app.command()
def doctor() -> None:
    """Diagnose common issues."""
    typer.echo("talktome system diagnosis\n")

    config = load_config()
    configure_logging(config)
    summary = config_summary(config)

    typer.echo("Configuration:")
    typer.echo(f"  Config file exists: {Path(summary['config_path']).exists()}")
    typer.echo(
        f"  OpenAI API key: {'configured' if summary['has_api_key'] else 'not configured'}"
    )
    if summary["has_api_key"]:
        try:
            valid = asyncio.run(OpenAIProvider().validate_api_key())
            typer.echo(f"  API key validation: {'valid' if valid else 'invalid'}")
        except TTSAuthError as e:
            typer.echo(f"  API key validation failed: {e}")

    typer.echo("\nCache:")
    try:
        stats = open_cache(config).stats()
        typer.echo(f"  Entries: {stats.total_entries}")
        typer.echo(f"  Size: {format_size(stats.total_size)}")
    except OSError as e:
        typer.echo(f"  Cache directory unusable: {e}")

    system = platform.system()
    typer.echo("\nAudio:")
    typer.echo(f"  Platform: {system}")
    typer.echo(f"  Playback: {PLAYBACK_SUPPORT.get(system, 'unsupported platform')}")

    if not summary["has_api_key"]:
        typer.echo("\nRecommendation: export OPENAI_API_KEY before running 'talktome say'.")


@app.command()
def serve(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Run the MCP server on stdio, exposing the speak_text tool."""
    config = load_config()
    configure_logging(config, debug)

    if not config_summary(config)["has_api_key"]:
        typer.echo("Error: OPENAI_API_KEY is not set", err=True)
        raise typer.Exit(1)

    logger.info("Starting MCP server on stdio")
    create_server(config).run()
