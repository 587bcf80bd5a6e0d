"""Aggregation Engine — fan-out/fan-in joins that build display-ready share views.

Invariants:
    - One edge query, then one gathered branch per edge
    - A branch never fails the aggregate: its lookups fall back to the configured
      label and the record is marked resolved=False
    - Result length always equals the number of edge records the query returned;
      a record that fails validation becomes a placeholder, never a gap
    - Delivered once, sorted by sharedAt descending
    - Only the initial edge query can fail the whole call

Design Decisions:
    - asyncio.gather keeps one slot per edge, so there is no shared counter or
      accumulating list to guard
    - get_shared_users_for_note scans every edge and filters client-side; cost is
      O(total edges), a known scalability limit rather than an index requirement
"""

import asyncio
import logging

from syncnote.core.domain_types import Permission
from syncnote.core.paths import SHARED_NOTES
from syncnote.core.result import Result
from syncnote.core.store_protocols import TreeStore
from syncnote.schemas.note import Note
from syncnote.schemas.share import EnrichedShare, ShareEdge
from syncnote.services.boundary import returns_result
from syncnote.services.credential_store import CredentialStore
from syncnote.services.note_repository import NoteRepository

logger = logging.getLogger(__name__)


async def _resolved(lookup) -> object | None:
    """Unwrap a Result-returning lookup; None on any failure."""
    try:
        result: Result = await lookup
    except Exception as e:
        logger.warning(f"Enrichment lookup raised: {e}")
        return None
    if not result.ok:
        logger.info(f"Enrichment lookup failed: {result.error}")
        return None
    return result.value


def _text(value) -> str | None:
    return value if isinstance(value, str) else None


class AggregationEngine:
    """Inbound and outbound share views enriched with note and account data."""

    def __init__(
        self,
        store: TreeStore,
        notes: NoteRepository,
        credentials: CredentialStore,
        unknown_user_label: str = "Unknown User",
        unavailable_note_label: str = "Unavailable note",
    ):
        self.store = store
        self.notes = notes
        self.credentials = credentials
        self.unknown_user_label = unknown_user_label
        self.unavailable_note_label = unavailable_note_label

    async def _branch(self, key: str, document, enrich) -> EnrichedShare:
        try:
            edge = ShareEdge.from_document(key, document)
        except ValueError as e:
            logger.warning(f"Malformed share edge {key}: {e}")
            return self._placeholder(key, document)
        return await enrich(edge)

    async def _gather(self, children: dict, enrich) -> list[EnrichedShare]:
        if not children:
            return []
        keys = list(children)
        outcomes = await asyncio.gather(
            *(self._branch(key, children[key], enrich) for key in keys),
            return_exceptions=True,
        )
        enriched = []
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Aggregation branch failed for edge {key}: {outcome}")
                outcome = self._placeholder(key, children[key])
            enriched.append(outcome)
        enriched.sort(key=lambda s: s.shared_at, reverse=True)
        logger.debug("Aggregation complete", extra={"edge_count": len(enriched)})
        return enriched

    def _placeholder(self, key: str, document) -> EnrichedShare:
        """Fallback record for an edge whose branch failed or whose document is malformed."""
        try:
            fields = ShareEdge.from_document(key, document).model_dump()
        except ValueError:
            raw = document if isinstance(document, dict) else {}
            shared_at = raw.get("sharedAt")
            fields = {
                "id": key,
                "note_id": _text(raw.get("noteId")) or "",
                "owner_id": _text(raw.get("ownerId")),
                "recipient_id": _text(raw.get("sharedWithUserId")),
                "permission": Permission.VIEW,
                "shared_at": shared_at if type(shared_at) is int else 0,
            }
        return EnrichedShare(
            **fields,
            note_title=self.unavailable_note_label,
            owner_username=self.unknown_user_label,
            recipient_username=self.unknown_user_label,
            resolved=False,
        )

    # ─── Inbound ────────────────────────────────────────────────

    async def _enrich_inbound(self, edge: ShareEdge) -> EnrichedShare:
        note, owner = await asyncio.gather(
            _resolved(self.notes.get_by_id(edge.note_id)),
            _resolved(self.credentials.get_account(edge.owner_id or "")),
        )
        resolved = isinstance(note, Note) and owner is not None
        return EnrichedShare(
            **edge.model_dump(),
            note_title=note.display_title if isinstance(note, Note) else self.unavailable_note_label,
            note_content=note.content if isinstance(note, Note) else None,
            owner_username=owner.username if owner is not None else self.unknown_user_label,
            resolved=resolved,
        )

    @returns_result("shared_notes_for_user")
    async def get_shared_notes_for_user(self, account_id: str) -> list[EnrichedShare]:
        """Notes shared with `account_id`, with title, content and owner name."""
        children = await self.store.query_equal(
            SHARED_NOTES, "sharedWithUserId", account_id,
        )
        return await self._gather(children, self._enrich_inbound)

    # ─── Outbound ───────────────────────────────────────────────

    async def _enrich_outbound(self, edge: ShareEdge) -> EnrichedShare:
        recipient = await _resolved(
            self.credentials.get_account(edge.recipient_id or ""),
        )
        return EnrichedShare(
            **edge.model_dump(),
            recipient_username=(
                recipient.username if recipient is not None else self.unknown_user_label
            ),
            resolved=recipient is not None,
        )

    @returns_result("shared_users_for_note")
    async def get_shared_users_for_note(self, note_id: str) -> list[EnrichedShare]:
        """Recipients of `note_id`, with their usernames."""
        everything = await self.store.read(SHARED_NOTES)
        if not isinstance(everything, dict):
            return []
        matching = {
            key: document for key, document in everything.items()
            if isinstance(document, dict) and document.get("noteId") == note_id
        }
        return await self._gather(matching, self._enrich_outbound)
