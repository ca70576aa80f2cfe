from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Environment variables are prefixed with ``LISTINGMATCH_``. Example:
        export LISTINGMATCH_TUNING_FILE=/etc/listingmatch/tuning.json
    """

    SECRET_KEY: str = "dev-key-change-in-production"
    EXPORT_DIR: Path = Path("Exports")
    # Optional JSON file with scoring overrides (tolerances / weights)
    TUNING_FILE: Path | None = None
    # Upper bound on comparables accepted per API request
    MAX_COMPARABLES: int = 500

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(env_prefix="LISTINGMATCH_", case_sensitive=False)


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None
