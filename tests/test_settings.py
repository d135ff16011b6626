"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from quickbill.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        """Test the default keys and file name."""
        monkeypatch.delenv("QUICKBILL_STORAGE_DATA_DIR", raising=False)
        settings = StorageSettings()
        assert settings.expenses_key == "quickbill_expenses"
        assert settings.onboarding_key == "quickbill_onboarding_complete"
        assert settings.storage_path == Path.home() / ".quickbill" / "storage.json"

    def test_from_environment(self, tmp_path, monkeypatch):
        """Test values are read from QUICKBILL_STORAGE_* variables."""
        monkeypatch.setenv("QUICKBILL_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("QUICKBILL_STORAGE_FILENAME", "data.json")
        assert StorageSettings().storage_path == tmp_path / "data.json"


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        """Test the startup defaults."""
        settings = AppSettings()
        assert settings.default_category == "Food"
        assert settings.default_period == "Today"
        assert settings.export_prefix == "QuickBill_Expenses"
        assert settings.log_level == "INFO"

    def test_log_level_is_normalized(self, monkeypatch):
        """Test log level names are case-insensitive."""
        monkeypatch.setenv("QUICKBILL_LOG_LEVEL", " debug ")
        assert AppSettings().log_level == "DEBUG"

    @pytest.mark.parametrize("name, value", [
        ("QUICKBILL_LOG_LEVEL", "LOUD"),
        ("QUICKBILL_DEFAULT_CATEGORY", "Groceries"),
        ("QUICKBILL_DEFAULT_PERIOD", "Year"),
        ("QUICKBILL_AUDIT_HISTORY_SIZE", "0"),
    ])
    def test_invalid_values_rejected(self, monkeypatch, name, value):
        """Test bad environment values fail validation."""
        monkeypatch.setenv(name, value)
        with pytest.raises(PydanticValidationError):
            AppSettings()


class TestSettingsRoot:
    """Tests for get_settings and validate_all_settings."""

    def test_get_settings_is_cached(self):
        """Test the same Settings object is returned until cleared."""
        assert get_settings() is get_settings()

    def test_validate_all_settings_ok(self):
        """Test a clean environment validates."""
        assert validate_all_settings() == {"storage": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test a failing section is reported with its error."""
        monkeypatch.setenv("QUICKBILL_DEFAULT_PERIOD", "Fortnight")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["app"] is False
        assert "app_error" in results
