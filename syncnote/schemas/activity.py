"""Activity Schema — append-only audit records at activity_logs/{id}.

Invariants:
    - action keeps the raw stored code; unknown codes are preserved, not rejected
    - display_text is derived, never stored
"""

from pydantic import Field

from syncnote.core.activity_text import describe
from syncnote.core.timestamps import now_ms
from syncnote.schemas.base import StoreDocument


class ActivityRecord(StoreDocument):
    note_id: str = Field(alias="noteId")
    actor_id: str | None = Field(None, alias="userId")
    actor_name: str | None = Field(None, alias="username")
    action: str
    detail: str | None = Field(None, alias="details")
    timestamp: int = Field(default_factory=now_ms)

    @property
    def display_text(self) -> str:
        return describe(self.action, self.detail)
