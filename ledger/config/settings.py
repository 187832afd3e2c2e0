"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
User-level preferences (display currency, exchange rates, theme) are NOT
configuration; they are ledger data persisted through the storage gateway.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed.json"


class StorageSettings(BaseSettings):
    """Key-value blob store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".ledger"),
        description="Directory holding one file per storage key"
    )

    # Keys within the blob store
    records_key: str = Field(
        default="finance-tracker:data",
        description="Key of the persisted transaction list"
    )
    settings_key: str = Field(
        default="finance-tracker:settings",
        description="Key of the persisted currency settings"
    )
    theme_key: str = Field(
        default="finance-tracker:theme",
        description="Key of the persisted UI theme"
    )

    seed_path: Optional[Path] = Field(
        default=None,
        description="Seed document used when no snapshot exists (bundled seed if unset)"
    )

    @property
    def resolved_seed_path(self) -> Path:
        return self.seed_path or DEFAULT_SEED_PATH


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )

    # Defaults for user preferences
    default_currency: str = Field(
        default="USD",
        description="Display currency used before the user picks one"
    )
    default_theme: str = Field(
        default="light",
        pattern="^(light|dark)$",
        description="Theme used before the user picks one"
    )

    export_filename: str = Field(
        default="finance_data_backup.json",
        description="File name offered for JSON exports"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings(
    settings: Optional[Settings] = None,
) -> dict[str, Union[bool, str]]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus {setting_name}_error
    messages for the groups that fail.
    Useful for startup checks.
    """
    results = {}

    settings = settings or get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
