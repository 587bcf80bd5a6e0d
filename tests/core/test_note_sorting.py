"""Note Sorting — verifies pinned-first partitioning under every comparator."""

from syncnote.core.domain_types import NoteSortOrder
from syncnote.core.note_sorting import sort_notes
from syncnote.schemas.note import Note


def _note(note_id, pinned=False, updated=0, created=0, title=""):
    return Note(
        id=note_id, owner_id="u1", pinned=pinned,
        updated_at=updated, created_at=created, title=title,
    )


def test_default_sort_is_pinned_by_recency_then_unpinned():
    a = _note("A", pinned=True, updated=1)
    b = _note("B", pinned=False, updated=5)
    c = _note("C", pinned=True, updated=3)
    assert [n.id for n in sort_notes([a, b, c])] == ["C", "A", "B"]


def test_title_sort_is_case_insensitive_and_none_safe():
    notes = [
        _note("1", title="banana"), _note("2", title="Apple"),
        _note("3", title=None), _note("4", pinned=True, title="zeta"),
    ]
    assert [n.id for n in sort_notes(notes, NoteSortOrder.TITLE_ASC)] == ["4", "3", "2", "1"]
    assert [n.id for n in sort_notes(notes, NoteSortOrder.TITLE_DESC)] == ["4", "1", "2", "3"]


def test_created_desc():
    notes = [_note("old", created=1), _note("new", created=9)]
    assert [n.id for n in sort_notes(notes, NoteSortOrder.CREATED_DESC)] == ["new", "old"]


def test_empty_input():
    assert sort_notes([]) == []
