"""Activity Log — append-only audit trail keyed by note.

Invariants:
    - append() never raises and never blocks: the write runs as a background task
    - record() is the awaitable form; it also swallows and logs every failure
    - Records are never mutated; they disappear only through the note-delete cascade
    - list_for_note returns timestamp desc and skips malformed records

Design Decisions:
    - Background tasks are held in a set until done, so they are not garbage
      collected mid-write; flush() awaits them (tests, shutdown)
    - append() outside a running event loop logs and drops the record
"""

import asyncio
import logging

from syncnote.core.domain_types import ActivityAction
from syncnote.core.paths import ACTIVITY_LOGS, join_path
from syncnote.core.store_protocols import TreeStore
from syncnote.core.timestamps import Clock, now_ms
from syncnote.schemas.activity import ActivityRecord
from syncnote.services.boundary import returns_result

logger = logging.getLogger(__name__)


class ActivityLog:
    """Audit records at activity_logs/{id}."""

    def __init__(self, store: TreeStore, clock: Clock = now_ms):
        self.store = store
        self.clock = clock
        self._pending: set[asyncio.Task] = set()

    def append(
        self,
        note_id: str,
        actor_id: str | None,
        actor_name: str | None,
        action: "str | ActivityAction",
        detail: str | None = None,
    ) -> None:
        """Fire-and-forget: schedule the write and return immediately."""
        try:
            task = asyncio.get_running_loop().create_task(
                self.record(note_id, actor_id, actor_name, action, detail),
            )
        except RuntimeError as e:
            logger.warning(
                f"Activity dropped, no running event loop: {e}",
                extra={"note_id": note_id},
            )
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def record(
        self,
        note_id: str,
        actor_id: str | None,
        actor_name: str | None,
        action: "str | ActivityAction",
        detail: str | None = None,
    ) -> None:
        code = action.value if isinstance(action, ActivityAction) else action
        try:
            activity_id = await self.store.push_id(ACTIVITY_LOGS)
            entry = ActivityRecord(
                note_id=note_id, actor_id=actor_id, actor_name=actor_name,
                action=code, detail=detail, timestamp=self.clock(),
            )
            await self.store.write(
                join_path(ACTIVITY_LOGS, activity_id), entry.to_document(),
            )
        except Exception as e:
            logger.warning(
                f"Activity write failed ({code}): {e}",
                extra={"note_id": note_id, "operation": "append_activity"},
            )

    async def flush(self) -> None:
        """Wait for every scheduled append to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    @property
    def pending(self) -> int:
        return len(self._pending)

    @returns_result("list_activity")
    async def list_for_note(self, note_id: str) -> list[ActivityRecord]:
        children = await self.store.query_equal(ACTIVITY_LOGS, "noteId", note_id)
        records = []
        for key, document in children.items():
            if not isinstance(document, dict):
                continue
            try:
                records.append(ActivityRecord.from_document(key, document))
            except ValueError as e:
                logger.warning(f"Skipping malformed activity record {key}: {e}")
        records.sort(key=lambda r: r.timestamp, reverse=True)
        return records
