"""Tests for environment-driven settings."""

import pytest

import config


@pytest.fixture(autouse=True)
def _fresh_settings():
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_defaults(monkeypatch) -> None:
    for name in ("MONGO_URI", "MONGODB_URI", "DB_NAME", "COLLECTION_NAME", "PORT", "RATE_LIMIT", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = config.get_settings()

    assert settings.mongo_uri == "mongodb://localhost:27017"
    assert settings.db_name == "income_expense_db"
    assert settings.collection_name == "transactions"
    assert settings.port == 5000
    assert settings.cors_allow_origins == ["*"]
    assert settings.rate_limit_enabled is False


def test_mongo_uri_takes_precedence_over_legacy_name(monkeypatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://primary:27017")
    monkeypatch.setenv("MONGODB_URI", "mongodb://legacy:27017")

    assert config.get_settings().mongo_uri == "mongodb://primary:27017"


def test_legacy_mongodb_uri_is_used_when_mongo_uri_missing(monkeypatch) -> None:
    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.setenv("MONGODB_URI", "mongodb://legacy:27017")

    assert config.get_settings().mongo_uri == "mongodb://legacy:27017"


def test_overrides_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000, https://ledger.example.com")
    monkeypatch.setenv("RATE_LIMIT", "15/minute")
    monkeypatch.setenv("RELOAD", "true")

    settings = config.get_settings()

    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.cors_allow_origins == ["http://localhost:3000", "https://ledger.example.com"]
    assert settings.rate_limit_enabled is True
    assert settings.reload is True
