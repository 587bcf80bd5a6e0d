"""Store Documents — verifies wire aliases, defaults, and note helpers.

Tests:
    - to_document uses camelCase keys, drops None and the id
    - from_document stamps the id from the key and ignores unknown keys
    - Note tag helpers never duplicate; display_title falls back when blank
    - Share edges parse permissions case-insensitively
"""

import pytest
from pydantic import ValidationError

from syncnote.core.domain_types import Permission
from syncnote.schemas.account import Account
from syncnote.schemas.note import UNTITLED, Note
from syncnote.schemas.share import ShareEdge


def test_note_document_uses_wire_names():
    doc = Note(id="n1", owner_id="u1", title="t", pinned=True, created_at=1, updated_at=2).to_document()
    assert doc["userId"] == "u1"
    assert doc["isPinned"] is True
    assert doc["createdAt"] == 1
    assert "id" not in doc
    assert "shareLink" not in doc


def test_from_document_stamps_key_and_ignores_unknown_fields():
    note = Note.from_document("n9", {"userId": "u1", "title": "x", "legacyField": 3, "id": "wrong"})
    assert note.id == "n9"
    assert note.owner_id == "u1"


def test_tags_never_duplicate():
    note = Note(owner_id="u1")
    note.add_tag("work")
    note.add_tag("work")
    note.add_tag("home")
    note.remove_tag("work")
    assert note.tags == ["home"]


@pytest.mark.parametrize("title", ["", None])
def test_display_title_falls_back(title):
    assert Note(owner_id="u1", title=title).display_title == UNTITLED


def test_share_edge_parses_permission():
    edge = ShareEdge.from_document("s1", {"noteId": "n1", "permission": "EDIT"})
    assert edge.permission is Permission.EDIT
    assert edge.can_edit and edge.can_view
    with pytest.raises(ValidationError):
        ShareEdge.from_document("s2", {"noteId": "n1", "permission": "owner"})


def test_account_repr_hides_hashes():
    account = Account(id="u1", username="alice", email="a@x.com", password_hash="salt$digest")
    assert "salt$digest" not in repr(account)
    assert account.to_document()["passwordHash"] == "salt$digest"
