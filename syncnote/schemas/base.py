"""Store Documents — shared base for entities persisted as tree-store subtrees.

Invariants:
    - Wire names are the camelCase keys existing records use (aliases)
    - Unknown keys in stored documents are ignored, never rejected
    - The id field is always re-populated from the storage key on read
    - to_document() omits None values (the store drops nulls anyway) and the
      id, which lives in the path key

Design Decisions:
    - populate_by_name: services construct models with snake_case names,
      documents round-trip through aliases
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class StoreDocument(BaseModel):
    """Entity stored at `{collection}/{id}`."""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", validate_assignment=True,
    )

    id: str | None = None

    @classmethod
    def from_document(cls, key: str, document: Any) -> Self:
        """Validate a raw snapshot and stamp the id from its path key."""
        data = dict(document) if isinstance(document, dict) else {}
        data["id"] = key
        return cls.model_validate(data)

    def to_document(self) -> dict:
        return self.model_dump(
            by_alias=True, exclude_none=True, exclude={"id"}, mode="json",
        )
