"""
Configuration Management for QuickBill

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage keys, file locations and UI defaults are read once at startup
so the rest of the package never touches the environment directly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """On-device key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="QUICKBILL_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".quickbill",
        description="Directory holding the storage file"
    )
    filename: str = Field(
        default="storage.json",
        min_length=1,
        description="Name of the JSON file backing the key-value store"
    )

    # Keys within the key-value store
    expenses_key: str = Field(
        default="quickbill_expenses",
        min_length=1,
        description="Key holding the JSON-encoded expense collection"
    )
    onboarding_key: str = Field(
        default="quickbill_onboarding_complete",
        min_length=1,
        description="Key recording onboarding completion"
    )

    @property
    def storage_path(self) -> Path:
        """Full path of the storage file."""
        return self.data_dir / self.filename


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUICKBILL_",
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
        description="Enable debug mode (human-readable console logs)"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the stdlib logging root"
    )

    # Form and filter defaults
    default_category: str = Field(
        default="Food",
        description="Category preselected in the expense form"
    )
    default_period: str = Field(
        default="Today",
        description="Period filter selected on startup and after clear-all"
    )

    # Export
    export_prefix: str = Field(
        default="QuickBill_Expenses",
        min_length=1,
        description="Filename prefix for CSV exports"
    )

    # Audit
    audit_history_size: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="How many audit events to keep in memory for the UI"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept the standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level

    @field_validator('default_category')
    @classmethod
    def validate_default_category(cls, v: str) -> str:
        from quickbill.models.expense import ExpenseCategory

        return ExpenseCategory(v).value

    @field_validator('default_period')
    @classmethod
    def validate_default_period(cls, v: str) -> str:
        from quickbill.models.expense import PeriodFilter

        return PeriodFilter(v).value


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

    # Sub-settings are loaded lazily to allow partial configuration

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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    ``<name>_error`` entry for each failure.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
