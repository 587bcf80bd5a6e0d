"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - store_backend is one of memory | firebase | sql

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SYNCNOTE_ prefix: settings never collide with other tools in the same environment
    - Defaults work offline: memory backend, local SQLite file for the sql backend
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from syncnote.core.domain_types import StoreBackend


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SYNCNOTE_", case_sensitive=False,
    )

    store_backend: StoreBackend = StoreBackend.MEMORY

    # Firebase Realtime Database (REST)
    firebase_database_url: str = "https://syncnote-default-rtdb.firebaseio.com"
    firebase_auth_token: str | None = None
    firebase_timeout_seconds: float = 30.0
    firebase_max_retries: int = 3
    firebase_base_delay_ms: int = 500
    firebase_max_delay_ms: int = 30_000

    @field_validator("firebase_database_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Local SQL store
    database_url: str = "sqlite+aiosqlite:///syncnote.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_sqlite_url(cls, v: str) -> str:
        """Plain sqlite:// URLs need the aiosqlite driver for the async engine."""
        if isinstance(v, str) and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Session cache
    session_file: str | None = None

    # Display fallbacks used by the aggregation engine
    unknown_user_label: str = "Unknown User"
    unavailable_note_label: str = "Unavailable note"

    share_link_length: int = 8

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
