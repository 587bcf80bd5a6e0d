"""Note Repository — verifies CRUD, ownership rules, and the delete cascade.

Tests:
    - create stamps createdAt == updatedAt and assigns an id
    - update is a full overwrite, stamps editor, never moves updatedAt back
    - list_by_owner returns only the owner's notes, updatedAt desc
    - list_by_owner skips documents that fail validation
    - delete removes note, edges, activity, and share link in one multi_write
    - single-field patches refuse missing notes
"""

from syncnote.core.errors import NotFoundError, StoreFailureError, ValidationError
from syncnote.schemas.note import DEFAULT_CATEGORY, DEFAULT_COLOR, Note


async def _create(client, owner, **fields):
    return (await client.notes.create(Note(owner_id=owner, **fields))).unwrap()


async def test_create_assigns_id_and_equal_timestamps(client, alice):
    note = Note(owner_id=alice, title="Groceries", content="milk")
    note_id = (await client.notes.create(note)).unwrap()
    assert note.id == note_id
    assert note.created_at == note.updated_at

    stored = (await client.notes.get_by_id(note_id)).unwrap()
    assert stored.id == note_id
    assert stored.title == "Groceries"
    assert stored.color == DEFAULT_COLOR
    assert stored.category == DEFAULT_CATEGORY
    assert stored.tags == []


async def test_create_requires_owner(client):
    result = await client.notes.create(Note(title="orphan"))
    assert isinstance(result.error, ValidationError)


async def test_update_overwrites_whole_document(client, alice, bob):
    note_id = await _create(client, alice, title="Old", content="body", tags=["x"])
    note = (await client.notes.get_by_id(note_id)).unwrap()
    created = note.created_at

    replacement = Note(id=note_id, owner_id=alice, title="New", updated_at=0)
    assert await client.notes.update(replacement, bob, "bob")

    stored = (await client.notes.get_by_id(note_id)).unwrap()
    assert stored.title == "New"
    assert stored.content == ""
    assert stored.tags == []
    assert stored.last_editor_id == bob
    assert stored.last_editor_name == "bob"
    assert stored.updated_at > created


async def test_update_never_moves_updated_at_backwards(client, alice, clock):
    note_id = await _create(client, alice, title="t")
    note = (await client.notes.get_by_id(note_id)).unwrap()
    note.updated_at = clock.now + 10_000_000
    assert await client.notes.update(note, alice, "alice")
    stored = (await client.notes.get_by_id(note_id)).unwrap()
    assert stored.updated_at == note.updated_at


async def test_update_refuses_owner_change_and_missing_note(client, alice, bob):
    note_id = await _create(client, alice, title="t")
    assert not await client.notes.update(
        Note(id=note_id, owner_id=bob, title="stolen"), bob, "bob",
    )
    assert (await client.notes.get_by_id(note_id)).unwrap().owner_id == alice
    assert not await client.notes.update(Note(id="missing", owner_id=alice), alice, "alice")
    assert not await client.notes.update(Note(owner_id=alice), alice, "alice")


async def test_get_missing_note_is_not_found(client):
    result = await client.notes.get_by_id("missing")
    assert isinstance(result.error, NotFoundError)


async def test_list_by_owner_filters_and_orders(client, alice, bob):
    first = await _create(client, alice, title="first")
    await _create(client, bob, title="bob's")
    second = await _create(client, alice, title="second")

    notes = (await client.notes.list_by_owner(alice)).unwrap()
    assert [n.id for n in notes] == [second, first]
    assert (await client.notes.list_by_owner("nobody")).unwrap() == []


async def test_list_by_owner_skips_malformed_documents(client, memory_store, alice):
    good = await _create(client, alice, title="good")
    await memory_store.write("notes/legacy", {
        "userId": alice, "title": "sparse", "tags": {"0": "a", "2": "b"},
    })

    notes = (await client.notes.list_by_owner(alice)).unwrap()
    assert [n.id for n in notes] == [good]


async def test_delete_cascades_edges_activity_and_link(client, memory_store, alice, bob, carol):
    note_id = await _create(client, alice, title="shared")
    other_id = await _create(client, alice, title="untouched")
    assert await client.sharing.share(note_id, alice, bob, "view")
    assert await client.sharing.share(note_id, alice, carol, "edit")
    assert await client.sharing.share(other_id, alice, bob, "view")
    await client.activity.record(note_id, alice, "alice", "created")
    await client.activity.record(other_id, alice, "alice", "created")
    code = (await client.sharing.generate_share_link(note_id, "view")).unwrap()

    assert await client.notes.delete(note_id)

    assert isinstance((await client.notes.get_by_id(note_id)).error, NotFoundError)
    assert (await client.sharing.get_edges_for_note(note_id)).unwrap() == []
    assert (await client.activity.list_for_note(note_id)).unwrap() == []
    assert "share_links" not in memory_store.dump()
    assert not (await client.sharing.resolve_share_link(code)).ok

    assert len((await client.sharing.get_edges_for_note(other_id)).unwrap()) == 1
    assert len((await client.activity.list_for_note(other_id)).unwrap()) == 1


async def test_delete_is_one_atomic_write(client, store, memory_store, alice, bob):
    note_id = await _create(client, alice, title="shared")
    assert await client.sharing.share(note_id, alice, bob, "view")
    before = memory_store.dump()

    store.fail_writes = True
    assert not await client.notes.delete(note_id)
    assert memory_store.dump() == before


async def test_field_patches(client, alice):
    note_id = await _create(client, alice, title="t")
    assert await client.notes.set_pinned(note_id, True)
    assert await client.notes.set_color(note_id, "#FF0000")
    assert await client.notes.set_category(note_id, "Work")
    stored = (await client.notes.get_by_id(note_id)).unwrap()
    assert (stored.pinned, stored.color, stored.category) == (True, "#FF0000", "Work")


async def test_field_patch_on_missing_note_writes_nothing(client, memory_store):
    assert not await client.notes.set_pinned("ghost", True)
    assert memory_store.dump() == {}


async def test_store_failure_reads_as_result(client, store, alice):
    note_id = await _create(client, alice, title="t")
    store.fail_read_prefixes.add("notes")
    result = await client.notes.get_by_id(note_id)
    assert isinstance(result.error, StoreFailureError)
