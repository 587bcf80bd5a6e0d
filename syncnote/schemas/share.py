"""Share Schemas — share edges, their enriched display form, and share-link tokens.

Invariants:
    - At most one ShareEdge per (note_id, recipient_id); enforced by the sharing service
    - permission is parsed case-insensitively into Permission
    - EnrichedShare.resolved is False when any enrichment lookup fell back to a label
"""

from pydantic import Field, field_validator

from syncnote.core.domain_types import Permission
from syncnote.core.timestamps import now_ms
from syncnote.schemas.base import StoreDocument


class ShareEdge(StoreDocument):
    """Edge linking one note to one recipient account."""
    note_id: str = Field(alias="noteId")
    owner_id: str | None = Field(None, alias="ownerId")
    recipient_id: str | None = Field(None, alias="sharedWithUserId")
    permission: Permission = Permission.VIEW
    shared_at: int = Field(default_factory=now_ms, alias="sharedAt")

    @field_validator("permission", mode="before")
    @classmethod
    def parse_permission(cls, v):
        return Permission.parse(v)

    @property
    def can_edit(self) -> bool:
        return self.permission.can_edit

    @property
    def can_view(self) -> bool:
        return self.permission.can_view


class EnrichedShare(ShareEdge):
    """Edge plus display fields gathered by the aggregation engine."""
    note_title: str | None = Field(None, alias="noteTitle")
    note_content: str | None = Field(None, alias="noteContent")
    owner_username: str | None = Field(None, alias="ownerUsername")
    recipient_username: str | None = Field(None, alias="sharedWithUsername")
    resolved: bool = True


class ShareLink(StoreDocument):
    """Token record at share_links/{code}; id holds the code."""
    note_id: str | None = Field(None, alias="noteId")
    permission: Permission = Permission.VIEW
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    active: bool = False

    @field_validator("permission", mode="before")
    @classmethod
    def parse_permission(cls, v):
        return Permission.parse(v)
