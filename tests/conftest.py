"""Pytest configuration and fixtures for talktome tests."""

import logging
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch, tmp_path: Path) -> Generator[Path, None, None]:
    """Point config and cache locations at a per-test temp directory."""
    import talktome.config

    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(talktome.config, "CONFIG_DIR", config_path.parent)
    monkeypatch.setattr(talktome.config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(talktome.config, "_cached_config", None)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))

    for name in (
        "TALKTOME_VOICE",
        "TALKTOME_MODEL",
        "TALKTOME_CACHE_DIR",
        "TALKTOME_CACHE_ENABLED",
        "TALKTOME_CACHE_MAX_SIZE_MB",
        "TALKTOME_CACHE_MAX_AGE_DAYS",
        "TALKTOME_LOG_LEVEL",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)

    yield config_path


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo logging.basicConfig(force=True) calls made by CLI commands."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def engine(cache_dir: Path, clock: FakeClock):
    from talktome.cache.manager import CacheEngine

    return CacheEngine(cache_dir, clock=clock)
