"""Store Factory — verifies backend selection from settings."""

from syncnote.config import Settings
from syncnote.infrastructure.firebase_store import FirebaseTreeStore
from syncnote.infrastructure.memory_store import InMemoryTreeStore
from syncnote.infrastructure.session_cache import (
    InMemorySessionCache, JsonFileSessionCache,
)
from syncnote.infrastructure.sql_store import SqlTreeStore
from syncnote.infrastructure.store_factory import build_session_cache, build_store


async def test_memory_backend():
    assert isinstance(build_store(Settings(_env_file=None)), InMemoryTreeStore)


async def test_firebase_backend_uses_settings():
    store = build_store(Settings(
        _env_file=None, store_backend="firebase",
        firebase_database_url="https://db.example.com", firebase_max_retries=1,
    ))
    assert isinstance(store, FirebaseTreeStore)
    assert store.max_retries == 1
    await store.close()


async def test_sql_backend(tmp_path):
    store = build_store(Settings(
        _env_file=None, store_backend="sql",
        database_url=f"sqlite:///{tmp_path / 'x.db'}",
    ))
    assert isinstance(store, SqlTreeStore)
    await store.close()


def test_session_cache_selection(tmp_path):
    assert isinstance(build_session_cache(Settings(_env_file=None)), InMemorySessionCache)
    file_cache = build_session_cache(
        Settings(_env_file=None, session_file=str(tmp_path / "s.json")),
    )
    assert isinstance(file_cache, JsonFileSessionCache)
