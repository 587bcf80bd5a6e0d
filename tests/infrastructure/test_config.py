"""Configuration — verifies defaults, env overrides, and URL normalization."""

import pytest
from pydantic import ValidationError

from syncnote.config import Settings
from syncnote.core.domain_types import StoreBackend


def test_defaults_work_offline():
    settings = Settings(_env_file=None)
    assert settings.store_backend is StoreBackend.MEMORY
    assert settings.unknown_user_label == "Unknown User"
    assert settings.share_link_length == 8


def test_env_prefix_overrides(monkeypatch):
    monkeypatch.setenv("SYNCNOTE_STORE_BACKEND", "sql")
    monkeypatch.setenv("SYNCNOTE_UNKNOWN_USER_LABEL", "Someone")
    settings = Settings(_env_file=None)
    assert settings.store_backend is StoreBackend.SQL
    assert settings.unknown_user_label == "Someone"


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, store_backend="mongo")


def test_firebase_url_trailing_slash_stripped():
    settings = Settings(_env_file=None, firebase_database_url="https://db.example.com/")
    assert settings.firebase_database_url == "https://db.example.com"


def test_plain_sqlite_url_upgraded_to_aiosqlite():
    settings = Settings(_env_file=None, database_url="sqlite:///notes.db")
    assert settings.database_url == "sqlite+aiosqlite:///notes.db"
