"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from fxrates.core.config import Settings, get_settings
from fxrates.main import create_app


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg2://fx:fx@db:5432/fx")
    monkeypatch.setenv("DATA_URL", "https://provider.example/live")
    monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "60")

    settings = Settings(_env_file=None)

    assert settings.database_url.startswith("postgresql")
    assert settings.data_url == "https://provider.example/live"
    assert settings.sync_interval_seconds == 60
    assert settings.base_currency == "USD"


def test_defaults(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DATA_URL", "https://provider.example/live")

    settings = Settings(_env_file=None)

    assert settings.sync_interval_seconds == 86400
    assert settings.api_prefix == ""


def test_missing_database_url_fails(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DATA_URL", "https://provider.example/live")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_create_app_fails_fast_without_database_url(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DATA_URL", "https://provider.example/live")
    get_settings.cache_clear()
    try:
        with pytest.raises(ValidationError):
            create_app()
    finally:
        get_settings.cache_clear()
