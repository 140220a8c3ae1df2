"""Tests for environment-driven settings."""

from datetime import timezone

import pytest

from scoring.errors import ConfigurationError
from webapp.config import Settings, get_settings, load_settings


def test_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.database_url == "memory://"
    assert settings.table == "leaderboard"
    assert settings.top_limit == 10
    assert settings.signing_secret is None
    assert settings.checksum_length == 16
    assert settings.timestamp_format == "%d-%m-%Y %H:%M:%S"
    assert settings.display_tz is timezone.utc


def test_values_from_environment():
    settings = load_settings(
        {
            "LEADERBOARD_DATABASE_URL": "postgresql://lb:lb@db:5432/lb",
            "LEADERBOARD_TABLE": "scores",
            "LEADERBOARD_TOP_LIMIT": "25",
            "LEADERBOARD_SIGNING_SECRET": "s3cret",
            "LEADERBOARD_CHECKSUM_LENGTH": "64",
            "LEADERBOARD_TIMESTAMP_FORMAT": "%Y-%m-%d",
            "LEADERBOARD_LOCAL_TZ": "Europe/Moscow",
            "LEADERBOARD_MAX_NAME_LENGTH": "20",
        }
    )
    assert settings.database_url == "postgresql://lb:lb@db:5432/lb"
    assert settings.table == "scores"
    assert settings.top_limit == 25
    assert settings.signing_secret == "s3cret"
    assert settings.checksum_length == 64
    assert settings.timestamp_format == "%Y-%m-%d"
    assert str(settings.display_tz) == "Europe/Moscow"
    assert settings.max_name_length == 20


@pytest.mark.parametrize(
    "env",
    [
        {"LEADERBOARD_TOP_LIMIT": "ten"},
        {"LEADERBOARD_TOP_LIMIT": "0"},
        {"LEADERBOARD_CHECKSUM_LENGTH": "65"},
        {"LEADERBOARD_TABLE": "scores; DROP TABLE x"},
        {"LEADERBOARD_LOCAL_TZ": "Mars/Olympus_Mons"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ConfigurationError):
        load_settings(env)


def test_get_settings_reads_process_environment(monkeypatch):
    monkeypatch.setenv("LEADERBOARD_TOP_LIMIT", "3")
    get_settings.cache_clear()
    try:
        assert get_settings().top_limit == 3
    finally:
        get_settings.cache_clear()
