"""Note Repository — CRUD over notes with ownership and cascade rules.

Invariants:
    - create stamps createdAt == updatedAt == now; the store assigns the id when absent
    - update is a FULL-document overwrite: callers pass the complete note
    - update never moves updatedAt backwards and never changes the stored owner
    - get_by_id re-populates note.id from the storage key
    - delete removes the note, every share edge, every activity record and the
      share-link token of the note in ONE multi_write
    - Single-field patches (pin, color, category) refuse notes that do not exist,
      so a patch never materializes an ownerless stub document

Design Decisions:
    - Full overwrite kept on purpose: a partial patch would change how concurrent
      edits conflict (last full write wins)
    - list_by_owner skips (and logs) documents that fail validation
    - list_by_owner returns updatedAt desc; pinned-first presentation lives in
      core/note_sorting.py
"""

import logging

from syncnote.core.domain_types import NoteId
from syncnote.core.errors import ErrorContext, NotFoundError, ValidationError
from syncnote.core.paths import (
    ACTIVITY_LOGS, NOTES, SHARE_LINKS, SHARED_NOTES, join_path,
)
from syncnote.core.store_protocols import TreeStore
from syncnote.core.timestamps import Clock, now_ms
from syncnote.schemas.note import Note
from syncnote.services.boundary import returns_bool, returns_result

logger = logging.getLogger(__name__)


class NoteRepository:
    """Notes stored at notes/{id}."""

    def __init__(self, store: TreeStore, clock: Clock = now_ms):
        self.store = store
        self.clock = clock

    async def _read(self, note_id: str) -> Note:
        document = await self.store.read(join_path(NOTES, note_id)) if note_id else None
        if not isinstance(document, dict):
            raise NotFoundError("Note", note_id, ErrorContext(note_id=note_id))
        return Note.from_document(note_id, document)

    @returns_result("create_note")
    async def create(self, note: Note) -> NoteId:
        """Persist a new note; stamps id and timestamps on the passed model too."""
        if not note.owner_id:
            raise ValidationError("Note owner is required", "owner_id")
        note_id = note.id or await self.store.push_id(NOTES)
        now = self.clock()
        note.id = note_id
        note.created_at = now
        note.updated_at = now
        await self.store.write(join_path(NOTES, note_id), note.to_document())
        logger.info(
            "Note created",
            extra={"note_id": note_id, "account_id": note.owner_id},
        )
        return NoteId(note_id)

    @returns_bool("update_note")
    async def update(self, note: Note, editor_id: str, editor_name: str) -> bool:
        """Overwrite the whole note, stamping editor and updatedAt."""
        if not note.id:
            raise ValidationError("Note id is required for update", "id")
        current = await self._read(note.id)
        if note.owner_id and note.owner_id != current.owner_id:
            raise ValidationError("Note owner cannot change", "owner_id")

        note.owner_id = current.owner_id
        note.updated_at = max(self.clock(), current.updated_at, note.updated_at)
        note.last_editor_id = editor_id
        note.last_editor_name = editor_name
        await self.store.write(join_path(NOTES, note.id), note.to_document())
        logger.info(
            "Note updated", extra={"note_id": note.id, "account_id": editor_id},
        )
        return True

    @returns_result("get_note")
    async def get_by_id(self, note_id: str) -> Note:
        return await self._read(note_id)

    @returns_result("list_notes")
    async def list_by_owner(self, owner_id: str) -> list[Note]:
        """Notes owned by `owner_id`, most recently updated first."""
        children = await self.store.query_equal(NOTES, "userId", owner_id)
        notes = []
        for key, document in children.items():
            if not isinstance(document, dict):
                continue
            try:
                notes.append(Note.from_document(key, document))
            except ValueError as e:
                logger.warning(f"Skipping malformed note {key}: {e}")
        notes.sort(key=lambda n: n.updated_at, reverse=True)
        return notes

    @returns_bool("delete_note")
    async def delete(self, note_id: str) -> bool:
        """Delete the note and cascade to its edges, activity and share link."""
        if not note_id:
            raise ValidationError("Note id is required", "note_id")
        note_path = join_path(NOTES, note_id)
        document = await self.store.read(note_path)
        edges = await self.store.query_equal(SHARED_NOTES, "noteId", note_id)
        logs = await self.store.query_equal(ACTIVITY_LOGS, "noteId", note_id)

        updates: dict = {note_path: None}
        for key in edges:
            updates[join_path(SHARED_NOTES, key)] = None
        for key in logs:
            updates[join_path(ACTIVITY_LOGS, key)] = None
        link = document.get("shareLink") if isinstance(document, dict) else None
        if isinstance(link, str) and link:
            updates[join_path(SHARE_LINKS, link)] = None

        await self.store.multi_write(updates)
        logger.info(
            f"Note deleted with {len(edges)} share(s) and {len(logs)} activity record(s)",
            extra={"note_id": note_id},
        )
        return True

    # ─── Single-field patches ───────────────────────────────────

    async def _patch(self, note_id: str, field: str, value) -> bool:
        await self._read(note_id)
        await self.store.write(join_path(NOTES, note_id, field), value)
        return True

    @returns_bool("set_pinned")
    async def set_pinned(self, note_id: str, pinned: bool) -> bool:
        return await self._patch(note_id, "isPinned", bool(pinned))

    @returns_bool("set_color")
    async def set_color(self, note_id: str, color: str) -> bool:
        if not color:
            raise ValidationError("Color is required", "color")
        return await self._patch(note_id, "color", color)

    @returns_bool("set_category")
    async def set_category(self, note_id: str, category: str) -> bool:
        if not category:
            raise ValidationError("Category is required", "category")
        return await self._patch(note_id, "category", category)
