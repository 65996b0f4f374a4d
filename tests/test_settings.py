"""Tests for environment-driven configuration."""

import pytest
from pathlib import Path

from pydantic import ValidationError

from clinic_ledger.config import AppSettings, AuthSettings, StorageSettings


class TestSettings:
    """Tests for the settings sections."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("CURRENCY_SYMBOL", raising=False)
        app = AppSettings(_env_file=None)
        assert app.log_level == "INFO"
        assert app.currency_symbol == "R$"

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings(_env_file=None).log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_storage_prefix(self, monkeypatch):
        monkeypatch.setenv("STORAGE_DATA_DIR", "/tmp/ledger")
        monkeypatch.setenv("STORAGE_STATE_KEY", "clinic")
        storage = StorageSettings()
        assert storage.data_dir == Path("/tmp/ledger")
        assert storage.state_key == "clinic"

    def test_storage_key_cannot_be_a_path(self, monkeypatch):
        monkeypatch.setenv("STORAGE_SESSION_KEY", "../auth")
        with pytest.raises(ValidationError):
            StorageSettings()

    def test_auth_prefix(self, monkeypatch):
        monkeypatch.setenv("AUTH_USERNAME", "reception")
        assert AuthSettings().username == "reception"
