"""Note Schema — the note document stored at notes/{id}.

Invariants:
    - owner_id (wire: userId) is set once at creation and never reassigned
    - updated_at >= created_at after every repository write
    - tags never contain duplicates
"""

from pydantic import Field

from syncnote.core.timestamps import now_ms
from syncnote.schemas.base import StoreDocument

DEFAULT_COLOR = "#FFFFFF"
DEFAULT_CATEGORY = "Uncategorized"
UNTITLED = "Untitled Note"


class Note(StoreDocument):
    """A note owned by exactly one account."""
    owner_id: str | None = Field(None, alias="userId")
    title: str | None = ""
    content: str | None = ""
    html_content: str | None = Field("", alias="htmlContent")
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")
    last_editor_id: str | None = Field(None, alias="lastUpdatedBy")
    last_editor_name: str | None = Field(None, alias="lastUpdatedByUsername")
    pinned: bool = Field(False, alias="isPinned")
    color: str = DEFAULT_COLOR
    category: str = DEFAULT_CATEGORY
    share_link: str | None = Field(None, alias="shareLink")
    tags: list[str] = Field(default_factory=list)

    @property
    def display_title(self) -> str:
        return self.title if self.title else UNTITLED

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags = [*self.tags, tag]

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]
