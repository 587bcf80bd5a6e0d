"""Activity Log — verifies fire-and-forget appends and newest-first listing.

Tests:
    - append returns immediately; flush() makes the write visible
    - Write failures are swallowed (append and record never raise)
    - list_for_note is newest first, scoped to one note, skips malformed records
    - append outside an event loop drops the record without raising
"""

from syncnote.core.domain_types import ActivityAction
from syncnote.core.errors import StoreFailureError
from syncnote.services.activity_log import ActivityLog


async def test_append_then_flush_persists(client, alice):
    assert client.activity.append("n1", alice, "alice", ActivityAction.CREATED) is None
    await client.activity.flush()
    (entry,) = (await client.activity.list_for_note("n1")).unwrap()
    assert entry.action == "created"
    assert entry.actor_name == "alice"
    assert entry.display_text == "created this note"
    assert client.activity.pending == 0


async def test_list_is_newest_first_and_scoped(client):
    await client.activity.record("n1", "u1", "alice", "created")
    await client.activity.record("n1", "u1", "alice", "shared", "Shared with @bob (view permission)")
    await client.activity.record("n2", "u1", "alice", "edited")

    entries = (await client.activity.list_for_note("n1")).unwrap()
    assert [e.action for e in entries] == ["shared", "created"]
    assert entries[0].display_text == "Shared with @bob (view permission)"


async def test_unknown_action_is_kept_raw(client):
    await client.activity.record("n1", "u1", "alice", "archived")
    (entry,) = (await client.activity.list_for_note("n1")).unwrap()
    assert entry.display_text == "archived"


async def test_write_failures_are_swallowed(client, store, memory_store):
    store.fail_writes = True
    client.activity.append("n1", "u1", "alice", "edited")
    await client.activity.flush()
    await client.activity.record("n1", "u1", "alice", "edited")
    assert memory_store.dump() == {}


async def test_malformed_records_are_skipped(client, memory_store):
    await memory_store.write("activity_logs/bad", {"noteId": "n1", "timestamp": "never"})
    await client.activity.record("n1", "u1", "alice", "pinned")
    entries = (await client.activity.list_for_note("n1")).unwrap()
    assert [e.action for e in entries] == ["pinned"]


async def test_list_failure_is_a_result(client, store):
    store.fail_queries = True
    result = await client.activity.list_for_note("n1")
    assert isinstance(result.error, StoreFailureError)


def test_append_without_event_loop_is_dropped(memory_store):
    log = ActivityLog(memory_store)
    log.append("n1", "u1", "alice", "created")
    assert log.pending == 0
    assert memory_store.dump() == {}
