"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId, NoteId, ShareId, CategoryId, ActivityId wrap store keys (str)
    - Permission has exactly two levels; edit implies view, view never implies edit
    - ActivityAction values are the wire codes stored in activity records
    - All valid states encoded as Enums — no raw string matching outside parse helpers

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize into store documents without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", str)
NoteId = NewType("NoteId", str)
ShareId = NewType("ShareId", str)
CategoryId = NewType("CategoryId", str)
ActivityId = NewType("ActivityId", str)
LinkCode = NewType("LinkCode", str)


# ─── Enums ───────────────────────────────────────────────────────

class Permission(str, Enum):
    """Access level carried by a share edge or share link."""
    VIEW = "view"
    EDIT = "edit"

    @classmethod
    def parse(cls, value: "str | Permission") -> "Permission":
        """Case-insensitive parse. Raises ValueError on unknown levels."""
        if isinstance(value, Permission):
            return value
        return cls(str(value).strip().lower())

    def allows(self, required: "Permission") -> bool:
        """True when this level grants `required`."""
        if self is Permission.EDIT:
            return True
        return required is Permission.VIEW

    @property
    def can_edit(self) -> bool:
        return self.allows(Permission.EDIT)

    @property
    def can_view(self) -> bool:
        return self.allows(Permission.VIEW)


class ActivityAction(str, Enum):
    """Audit actions recorded against a note."""
    CREATED = "created"
    EDITED = "edited"
    SHARED = "shared"
    UNSHARED = "unshared"
    PERMISSION_CHANGED = "permission_changed"
    PINNED = "pinned"
    UNPINNED = "unpinned"
    COLOR_CHANGED = "color_changed"
    CATEGORY_CHANGED = "category_changed"


class NoteSortOrder(str, Enum):
    """Comparators offered by the note list."""
    UPDATED_DESC = "updated_desc"
    CREATED_DESC = "created_desc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"


class StoreBackend(str, Enum):
    """Tree store implementations selectable from settings."""
    MEMORY = "memory"
    FIREBASE = "firebase"
    SQL = "sql"
