"""Note Sorting — pin-partitioned sort policy for note lists.

Invariants:
    - Pinned notes always precede unpinned notes
    - Each partition is sorted independently by the same comparator
    - A None title sorts as the empty string
    - Sorting is stable: ties keep their input order

Design Decisions:
    - Pure function over the repository output, not a repository method:
      the repository returns updatedAt-desc, presentation picks the comparator
"""

from collections.abc import Iterable

from syncnote.core.domain_types import NoteSortOrder
from syncnote.schemas.note import Note


def _title_key(note: Note) -> str:
    return (note.title or "").casefold()


def _sort_partition(notes: list[Note], order: NoteSortOrder) -> list[Note]:
    if order is NoteSortOrder.CREATED_DESC:
        return sorted(notes, key=lambda n: n.created_at, reverse=True)
    if order is NoteSortOrder.TITLE_ASC:
        return sorted(notes, key=_title_key)
    if order is NoteSortOrder.TITLE_DESC:
        return sorted(notes, key=_title_key, reverse=True)
    return sorted(notes, key=lambda n: n.updated_at, reverse=True)


def sort_notes(
    notes: Iterable[Note], order: NoteSortOrder = NoteSortOrder.UPDATED_DESC,
) -> list[Note]:
    """Pinned first, then unpinned, each sorted by `order`. Pure, no IO."""
    notes = list(notes)
    pinned = [n for n in notes if n.pinned]
    unpinned = [n for n in notes if not n.pinned]
    return _sort_partition(pinned, order) + _sort_partition(unpinned, order)
