"""SyncNote Client — verifies wiring, sign-in session handling, and lifecycle."""

from syncnote.client import SyncNoteClient
from syncnote.config import Settings
from syncnote.core.errors import BadCredentialsError
from syncnote.infrastructure.memory_store import InMemoryTreeStore
from syncnote.infrastructure.session_cache import JsonFileSessionCache, UserSession


async def test_sign_in_stores_session(client, alice):
    result = await client.sign_in("Alice", "secret1")
    assert result.ok
    assert client.session.is_logged_in
    assert client.session.account_id == alice
    assert client.session.username == "alice"
    assert client.session.email == "a@x.com"

    client.sign_out()
    assert not client.session.is_logged_in


async def test_failed_sign_in_leaves_session_empty(client, alice):
    result = await client.sign_in("alice", "nope")
    assert isinstance(result.error, BadCredentialsError)
    assert not client.session.is_logged_in


async def test_from_settings_builds_configured_components(tmp_path):
    settings = Settings(
        _env_file=None, store_backend="memory",
        session_file=str(tmp_path / "session.json"),
    )
    async with SyncNoteClient.from_settings(settings) as c:
        assert isinstance(c.store, InMemoryTreeStore)
        assert (await c.credentials.register("zoe", "z@x.com", "pw")).ok
        assert (await c.sign_in("zoe", "pw")).ok

    assert UserSession(JsonFileSessionCache(tmp_path / "session.json")).username == "zoe"


async def test_close_flushes_pending_activity(settings):
    store = InMemoryTreeStore()
    c = SyncNoteClient(store, settings=settings)
    c.activity.append("n1", "u1", "alice", "created")
    await c.close()
    assert len(store.dump()["activity_logs"]) == 1
