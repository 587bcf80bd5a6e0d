"""Category Schema — per-owner labels at categories/{id}."""

from pydantic import Field

from syncnote.core.timestamps import now_ms
from syncnote.schemas.base import StoreDocument


class Category(StoreDocument):
    owner_id: str = Field(alias="userId")
    name: str
    color: str | None = None
    note_count: int = Field(0, alias="noteCount")
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
