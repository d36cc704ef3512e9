"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here: where the store persists its
snapshot, and the knobs the aggregation views use (currency symbol,
"this week" window, page size, trend length).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Durable key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(memory|file)$",
        description="Storage backend: 'memory' (ephemeral) or 'file' (JSON files)"
    )
    data_dir: Path = Field(
        default=Path(".expense_tracker"),
        description="Directory holding one JSON file per storage key"
    )

    # Keys under which the two collections are persisted
    expenses_key: str = Field(
        default="expenses",
        min_length=1,
        description="Storage key for the serialized expense list"
    )
    categories_key: str = Field(
        default="categories",
        min_length=1,
        description="Storage key for the serialized category list"
    )

    @field_validator("expenses_key", "categories_key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key must not contain path separators: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
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

    # Display
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=5,
        description="Symbol used by format_currency (single currency only)"
    )

    # Aggregation views
    week_window_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Length of the 'this week' filter window in days"
    )
    items_per_page: int = Field(
        default=7,
        ge=1,
        le=100,
        description="Expenses per page in the list view"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Number of months in the monthly trend series"
    )

    # Events
    event_history_size: int = Field(
        default=100,
        ge=0,
        le=10000,
        description="How many store events to keep in memory"
    )


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


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
