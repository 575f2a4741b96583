# tests/test_settings.py
"""Tests for application settings."""

from univibe.core.settings import Settings


def test_database_url_is_used_verbatim(monkeypatch) -> None:
    url = "postgresql+asyncpg://univibe:secret@db:5432/univibe"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.delenv("USE_TEST_DATABASE", raising=False)
    assert Settings().effective_database_url == url


def test_testing_database_override(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./main.db")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("USE_TEST_DATABASE", "true")
    assert Settings().effective_database_url == "sqlite://"
