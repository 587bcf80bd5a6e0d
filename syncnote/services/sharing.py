"""Sharing & Permission Graph — share edges between notes and accounts, plus share links.

Invariants:
    - At most one edge per (note, recipient): share() reuses the existing edge id
      and removes any duplicates left behind by a past race, in one multi_write
    - share() requires an existing note owned by owner_id and an existing recipient
      account; an owner never shares with themselves
    - update_permission writes only the permission field, on every edge of the
      pair in one multi_write
    - Share-link codes are generated client-side; uniqueness is probabilistic,
      checked once against the store before writing
    - resolve_share_link: missing token -> InvalidShareLinkError,
      inactive token -> ExpiredShareLinkError

Design Decisions:
    - Known race: share / unshare / update_permission scan then patch without an
      optimistic-concurrency token, so concurrent edits of one edge can lose an update
    - generate_share_link writes the token first and stamps the note second; the
      two writes are not atomic, an orphan token is unreachable and harmless
"""

import logging
import uuid

from syncnote.core.domain_types import LinkCode, Permission
from syncnote.core.errors import (
    ErrorContext, ExpiredShareLinkError, InvalidShareLinkError, NotFoundError,
    StoreFailureError, ValidationError,
)
from syncnote.core.paths import (
    NOTES, SHARE_LINKS, SHARED_NOTES, USERS, join_path, validate_segment,
)
from syncnote.core.store_protocols import TreeStore
from syncnote.core.timestamps import Clock, now_ms
from syncnote.schemas.note import Note
from syncnote.schemas.share import ShareEdge, ShareLink
from syncnote.services.boundary import returns_bool, returns_result

logger = logging.getLogger(__name__)

_CODE_ATTEMPTS = 5


def parse_permission(value: "str | Permission") -> Permission:
    try:
        return Permission.parse(value)
    except ValueError:
        raise ValidationError(
            f"Unknown permission {value!r}; expected 'view' or 'edit'", "permission",
        )


def parse_edges(children: dict) -> list[ShareEdge]:
    edges = []
    for key, document in children.items():
        if not isinstance(document, dict):
            continue
        try:
            edges.append(ShareEdge.from_document(key, document))
        except ValueError as e:
            logger.warning(f"Skipping malformed share edge {key}: {e}")
    edges.sort(key=lambda e: e.shared_at, reverse=True)
    return edges


class SharingGraph:
    """Edges at shared_notes/{id}, tokens at share_links/{code}."""

    def __init__(
        self, store: TreeStore, clock: Clock = now_ms, link_length: int = 8,
    ):
        self.store = store
        self.clock = clock
        self.link_length = link_length

    async def _read_note(self, note_id: str) -> Note:
        document = await self.store.read(join_path(NOTES, note_id)) if note_id else None
        if not isinstance(document, dict):
            raise NotFoundError("Note", note_id, ErrorContext(note_id=note_id))
        return Note.from_document(note_id, document)

    async def _edges_for_note(self, note_id: str) -> list[ShareEdge]:
        return parse_edges(await self.store.query_equal(SHARED_NOTES, "noteId", note_id))

    async def _edges_for_pair(self, note_id: str, recipient_id: str) -> list[ShareEdge]:
        return [
            e for e in await self._edges_for_note(note_id)
            if e.recipient_id == recipient_id
        ]

    # ─── Edges ──────────────────────────────────────────────────

    @returns_bool("share")
    async def share(
        self, note_id: str, owner_id: str, recipient_id: str,
        permission: "str | Permission",
    ) -> bool:
        """Create or overwrite the single edge for (note, recipient)."""
        perm = parse_permission(permission)
        if not recipient_id:
            raise ValidationError("Recipient is required", "recipient_id")
        if recipient_id == owner_id:
            raise ValidationError("You cannot share a note with yourself", "recipient_id")

        note = await self._read_note(note_id)
        if note.owner_id != owner_id:
            raise ValidationError("Only the owner can share this note", "owner_id")
        if await self.store.read(join_path(USERS, recipient_id)) is None:
            raise NotFoundError("Account", recipient_id)

        existing = await self._edges_for_pair(note_id, recipient_id)
        share_id = existing[-1].id if existing else await self.store.push_id(SHARED_NOTES)
        edge = ShareEdge(
            id=share_id, note_id=note_id, owner_id=owner_id,
            recipient_id=recipient_id, permission=perm, shared_at=self.clock(),
        )
        updates: dict = {join_path(SHARED_NOTES, share_id): edge.to_document()}
        for duplicate in existing:
            if duplicate.id != share_id:
                updates[join_path(SHARED_NOTES, duplicate.id)] = None
        await self.store.multi_write(updates)
        logger.info(
            f"Note shared ({perm.value}), {'updated' if existing else 'new'} edge",
            extra={"note_id": note_id, "account_id": recipient_id},
        )
        return True

    @returns_bool("unshare")
    async def unshare(self, note_id: str, recipient_id: str) -> bool:
        """Remove the edge for (note, recipient). False when there is none."""
        existing = await self._edges_for_pair(note_id, recipient_id)
        if not existing:
            return False
        await self.store.multi_write({
            join_path(SHARED_NOTES, edge.id): None for edge in existing
        })
        logger.info("Note unshared", extra={"note_id": note_id, "account_id": recipient_id})
        return True

    @returns_bool("update_permission")
    async def update_permission(
        self, note_id: str, recipient_id: str, new_permission: "str | Permission",
    ) -> bool:
        perm = parse_permission(new_permission)
        existing = await self._edges_for_pair(note_id, recipient_id)
        if not existing:
            return False
        await self.store.multi_write({
            join_path(SHARED_NOTES, edge.id, "permission"): perm.value for edge in existing
        })
        return True

    @returns_result("edges_for_note")
    async def get_edges_for_note(self, note_id: str) -> list[ShareEdge]:
        return await self._edges_for_note(note_id)

    @returns_result("edges_for_recipient")
    async def get_edges_for_recipient(self, recipient_id: str) -> list[ShareEdge]:
        return parse_edges(
            await self.store.query_equal(SHARED_NOTES, "sharedWithUserId", recipient_id),
        )

    @returns_result("get_permission")
    async def get_permission(self, note_id: str, account_id: str) -> Permission | None:
        """Effective access: EDIT for the owner, the edge level for recipients, else None."""
        note = await self._read_note(note_id)
        if note.owner_id == account_id:
            return Permission.EDIT
        edges = await self._edges_for_pair(note_id, account_id)
        return edges[0].permission if edges else None

    # ─── Share links ────────────────────────────────────────────

    def _new_code(self) -> str:
        return uuid.uuid4().hex[: self.link_length].upper()

    @returns_result("generate_share_link")
    async def generate_share_link(
        self, note_id: str, permission: "str | Permission",
    ) -> LinkCode:
        perm = parse_permission(permission)
        await self._read_note(note_id)

        for _ in range(_CODE_ATTEMPTS):
            code = self._new_code()
            if await self.store.read(join_path(SHARE_LINKS, code)) is None:
                break
        else:
            raise StoreFailureError("could not allocate a unique link code", "generate_share_link")

        link = ShareLink(
            id=code, note_id=note_id, permission=perm,
            created_at=self.clock(), active=True,
        )
        await self.store.write(join_path(SHARE_LINKS, code), link.to_document())
        try:
            await self.store.write(join_path(NOTES, note_id, "shareLink"), code)
        except Exception as e:
            logger.warning(
                f"Share link created but note stamp failed: {e}",
                extra={"note_id": note_id},
            )
        logger.info("Share link generated", extra={"note_id": note_id})
        return LinkCode(code)

    async def _read_link(self, code: str) -> ShareLink:
        normalized = (code or "").strip().upper()
        try:
            validate_segment(normalized)
        except ValueError:
            raise InvalidShareLinkError(code)
        document = await self.store.read(join_path(SHARE_LINKS, normalized))
        if not isinstance(document, dict):
            raise InvalidShareLinkError(code)
        try:
            return ShareLink.from_document(normalized, document)
        except ValueError:
            raise InvalidShareLinkError(code)

    @returns_result("resolve_share_link")
    async def resolve_share_link(self, code: str) -> Note:
        link = await self._read_link(code)
        if not link.active:
            raise ExpiredShareLinkError(code)
        if not link.note_id:
            raise InvalidShareLinkError(code)
        try:
            return await self._read_note(link.note_id)
        except NotFoundError:
            raise InvalidShareLinkError(code)

    @returns_bool("deactivate_share_link")
    async def deactivate_share_link(self, code: str) -> bool:
        link = await self._read_link(code)
        await self.store.write(join_path(SHARE_LINKS, link.id, "active"), False)
        logger.info("Share link deactivated", extra={"note_id": link.note_id})
        return True
