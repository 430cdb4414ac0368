"""Tests for environment-driven settings."""

import pytest

from travelpulse.config import Settings, get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test defaults when nothing is configured."""
    monkeypatch.delenv("TRAVELPULSE_REMOTE_STORE_URL", raising=False)

    settings = Settings(_env_file=None)

    assert settings.remote_store_url is None
    assert not settings.remote_configured
    assert settings.trip_collection == "trips"
    assert settings.trip_document_id == "travel_pulse_default_trip"
    assert settings.archive_collection == "archives"
    assert settings.save_debounce_ms == 1000


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test TRAVELPULSE_ variables override defaults."""
    monkeypatch.setenv("TRAVELPULSE_REMOTE_STORE_URL", "https://store.example/v1")
    monkeypatch.setenv("TRAVELPULSE_SAVE_DEBOUNCE_MS", "250")
    monkeypatch.setenv("TRAVELPULSE_TRIP_DOCUMENT_ID", "family_trip")

    settings = Settings(_env_file=None)

    assert settings.remote_configured
    assert settings.save_debounce_ms == 250
    assert settings.trip_document_id == "family_trip"


@pytest.mark.parametrize("url", ["", "   "])
def test_blank_remote_url_means_local_only(url: str) -> None:
    """Test blank remote URLs count as unconfigured."""
    assert not Settings(_env_file=None, remote_store_url=url).remote_configured


def test_get_settings_is_cached() -> None:
    """Test settings are built once per process."""
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
