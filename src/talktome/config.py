"""Configuration management for talktome.

Loads configuration from ~/.config/talktome/config.toml.
Priority chain: CLI flags > env vars > config file > defaults.
"""

import json
import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .tts.models import parse_model, parse_voice

CONFIG_DIR = Path.home() / ".config" / "talktome"
CONFIG_PATH = CONFIG_DIR / "config.toml"

LOG_LEVELS = ("error", "warning", "info", "debug")
MIN_CACHE_SIZE_MB, MAX_CACHE_SIZE_MB = 10, 10000
MIN_CACHE_AGE_DAYS, MAX_CACHE_AGE_DAYS = 1, 365

DEFAULT_CONFIG = """\
# talktome configuration

[tts]
# Voice: alloy, echo, fable, onyx, nova, shimmer
voice = "alloy"

# Model: "tts-1" (fast) or "tts-1-hd" (high quality)
model = "tts-1"

[cache]
# Reuse previously synthesized audio for identical requests
enabled = true

# Cache directory (default: ~/.cache/talktome)
# directory = "~/.cache/talktome"

# Least recently used audio is evicted above this size (10-10000 MB)
max_size_mb = 500

# Audio older than this is deleted at startup (1-365 days)
max_age_days = 30

[logging]
# One of: error, warning, info, debug
level = "info"

# The OpenAI API key is read from the environment, not this file:
#   OPENAI_API_KEY
"""


@dataclass(frozen=True)
class TTSConfig:
    """Speech synthesis defaults."""

    voice: str
    model: str


@dataclass(frozen=True)
class CacheConfig:
    """Audio cache configuration."""

    enabled: bool
    directory: Path | None
    max_size_mb: int
    max_age_days: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str


@dataclass(frozen=True)
class TalkToMeConfig:
    """Top-level talktome configuration."""

    tts: TTSConfig
    cache: CacheConfig
    logging: LoggingConfig


_cached_config: TalkToMeConfig | None = None


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file."""
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _int_setting(name: str, value: object, low: int, high: int) -> int:
    # int() would truncate floats and accept booleans
    if isinstance(value, (bool, float)):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if not low <= number <= high:
        raise ConfigError(f"{name} must be between {low} and {high}, got {number}")
    return number


def _bool_setting(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("1", "true", "yes", "on"):
        return True
    if isinstance(value, str) and value.lower() in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def parse_config(data: dict) -> TalkToMeConfig:
    """Build a validated config from parsed TOML with env var overrides.

    Raises:
        ConfigError: If any value is invalid
    """
    tts = _section(data, "tts")
    cache = _section(data, "cache")
    log = _section(data, "logging")

    try:
        voice = parse_voice(os.getenv("TALKTOME_VOICE", tts.get("voice", "alloy")))
        model = parse_model(os.getenv("TALKTOME_MODEL", tts.get("model", "tts-1")))
    except ValueError as e:
        raise ConfigError(str(e)) from None

    directory = os.getenv("TALKTOME_CACHE_DIR", cache.get("directory"))

    level = str(os.getenv("TALKTOME_LOG_LEVEL", log.get("level", "info"))).lower()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}"
        )

    return TalkToMeConfig(
        tts=TTSConfig(voice=voice.value, model=model.value),
        cache=CacheConfig(
            enabled=_bool_setting(
                "cache.enabled",
                os.getenv("TALKTOME_CACHE_ENABLED", cache.get("enabled", True)),
            ),
            directory=Path(directory).expanduser() if directory else None,
            max_size_mb=_int_setting(
                "cache.max_size_mb",
                os.getenv("TALKTOME_CACHE_MAX_SIZE_MB", cache.get("max_size_mb", 500)),
                MIN_CACHE_SIZE_MB,
                MAX_CACHE_SIZE_MB,
            ),
            max_age_days=_int_setting(
                "cache.max_age_days",
                os.getenv("TALKTOME_CACHE_MAX_AGE_DAYS", cache.get("max_age_days", 30)),
                MIN_CACHE_AGE_DAYS,
                MAX_CACHE_AGE_DAYS,
            ),
        ),
        logging=LoggingConfig(level=level),
    )


def load_config(path: Path | None = None) -> TalkToMeConfig:
    """Load configuration from the config file with env var overrides.

    On first run, generates the default config file and continues with
    its defaults.

    Args:
        path: Config file to read (defaults to ~/.config/talktome/config.toml;
            only the default location is cached)

    Returns:
        Loaded and validated TalkToMeConfig.

    Raises:
        SystemExit: If the config file cannot be parsed or holds invalid values.
    """
    global _cached_config
    if path is None and _cached_config is not None:
        return _cached_config

    config_path = path or CONFIG_PATH

    if not config_path.exists():
        try:
            generate_config(config_path)
            print(f"No config found. Generated {config_path}", file=sys.stderr)
        except OSError as e:
            print(f"Could not write default config: {e}", file=sys.stderr)

    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            print(f"Invalid config file {config_path}: {e}", file=sys.stderr)
            print("Edit it or delete it to regenerate.", file=sys.stderr)
            raise SystemExit(1) from None

    try:
        config = parse_config(data)
    except ConfigError as e:
        print(f"Invalid config value: {e}", file=sys.stderr)
        print(f"Edit {config_path} or delete it to regenerate.", file=sys.stderr)
        raise SystemExit(1) from None

    if path is None:
        _cached_config = config
    return config


def reset_config(path: Path | None = None) -> Path:
    """Overwrite the config file with defaults and drop the cached config."""
    global _cached_config
    _cached_config = None
    return generate_config(path or CONFIG_PATH)


def config_summary(config: TalkToMeConfig, path: Path | None = None) -> dict:
    """Flat view of the effective configuration (never includes the API key)."""
    return {
        "has_api_key": bool(os.getenv("OPENAI_API_KEY")),
        "default_voice": config.tts.voice,
        "default_model": config.tts.model,
        "cache_enabled": config.cache.enabled,
        "cache_directory": str(config.cache.directory) if config.cache.directory else None,
        "cache_max_size_mb": config.cache.max_size_mb,
        "cache_max_age_days": config.cache.max_age_days,
        "log_level": config.logging.level,
        "config_path": str(path or CONFIG_PATH),
    }


def export_config(config: TalkToMeConfig, path: Path | None = None) -> str:
    """Configuration summary as pretty-printed JSON."""
    return json.dumps(config_summary(config, path), indent=2)
