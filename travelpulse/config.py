"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from travelpulse.models.trip import DEFAULT_COVER_IMAGE, DEFAULT_DESTINATION


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="TRAVELPULSE_", extra="ignore"
    )

    # Remote document store (empty = local-only mode)
    remote_store_url: str | None = None
    remote_store_token: str = ""
    remote_timeout_seconds: float = 4.0

    # Local on-device cache
    local_store_url: str = "sqlite+aiosqlite:///./travelpulse_cache.db"

    # Document layout
    trip_collection: str = "trips"
    trip_document_id: str = "travel_pulse_default_trip"
    archive_collection: str = "archives"

    # Write-through debounce (milliseconds)
    save_debounce_ms: int = 1000
    flush_on_shutdown: bool = True

    # Reset defaults
    default_destination: str = DEFAULT_DESTINATION
    default_cover_image: str = DEFAULT_COVER_IMAGE

    @property
    def remote_configured(self) -> bool:
        """Whether a remote store URL has been supplied."""
        return bool(self.remote_store_url and self.remote_store_url.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
