"""TreeNode ORM — one row per top-level child of a tree-store collection.

Invariants:
    - (collection, key) is the primary key: notes/{id} is exactly one row
    - document holds the whole subtree below the key as JSON (objects or scalars)
    - Rows are deleted, never stored with a null document

Design Decisions:
    - Two-level split instead of one row per leaf: every entity read is one row,
      equality queries scan one collection (ADR: entities are small documents)
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from syncnote.db.base import Base


class TreeNode(Base):
    __tablename__ = "tree_nodes"

    collection: Mapped[str] = mapped_column(String(128), primary_key=True)
    key: Mapped[str] = mapped_column(String(256), primary_key=True)
    document: Mapped[Any] = mapped_column(JSON, nullable=False)
