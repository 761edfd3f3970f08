"""Tests for environment-driven settings."""

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from dishcarbon.config import Settings, get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "DISHCARBON_MAX_FILE_SIZE_MB",
        "DISHCARBON_LOG_LEVEL",
        "DISHCARBON_FOOTPRINT_TABLE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.max_file_size_mb == 10
    assert settings.max_file_size_bytes == 10 * 1024 * 1024
    assert settings.log_level == "INFO"
    assert settings.footprint_table is None


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISHCARBON_MAX_FILE_SIZE_MB", "2")
    monkeypatch.setenv("DISHCARBON_LOG_LEVEL", "DEBUG")
    settings = get_settings()
    assert settings.max_file_size_bytes == 2 * 1024 * 1024
    assert settings.log_level == "DEBUG"
    assert get_settings() is settings


def test_invalid_values_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISHCARBON_MAX_FILE_SIZE_MB", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
    monkeypatch.setenv("DISHCARBON_MAX_FILE_SIZE_MB", "1")
    monkeypatch.setenv("DISHCARBON_LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
