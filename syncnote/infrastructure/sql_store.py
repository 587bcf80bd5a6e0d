"""SQL Tree Store — durable local TreeStore backend on SQLAlchemy async.

Invariants:
    - Paths map to rows by their first two segments (collection, key); deeper
      segments address inside the row's JSON document
    - write() and multi_write() each run in exactly one transaction: all listed
      paths commit together or none do
    - Null values and empty parents vanish, matching the other backends
    - Schema is created lazily on first use (idempotent)

Design Decisions:
    - Equality queries filter in Python after selecting one collection: portable
      across SQLite and PostgreSQL JSON dialects
    - flush() after every applied path so two paths touching the same row see
      each other's pending changes within the transaction
"""

import asyncio
import copy
import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from syncnote.core.errors import ErrorContext, StoreFailureError
from syncnote.core.paths import split_path, validate_segment
from syncnote.core.push_ids import PushIdGenerator
from syncnote.core.tree_ops import check_disjoint, get_in, prune, set_in
from syncnote.infrastructure.database import DatabaseSessionManager
from syncnote.models.tree_node import TreeNode

logger = logging.getLogger(__name__)


def _segments(path: str, operation: str) -> list[str]:
    try:
        return [validate_segment(s) for s in split_path(path)]
    except ValueError as e:
        raise StoreFailureError(str(e), operation, ErrorContext(path=path))


class SqlTreeStore:
    """TreeStore persisted in a single `tree_nodes` table."""

    def __init__(self, database_url: str, **engine_kwargs):
        self.db = DatabaseSessionManager(database_url, **engine_kwargs)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()
        self._push_id = PushIdGenerator()

    async def read(self, path: str) -> Any | None:
        segments = _segments(path, "read")
        await self._ensure_schema()
        async with self.db.session() as db:
            if len(segments) < 2:
                query = select(TreeNode)
                if segments:
                    query = query.where(TreeNode.collection == segments[0])
                rows = (await db.execute(query)).scalars().all()
                if not segments:
                    tree: dict = {}
                    for row in rows:
                        tree.setdefault(row.collection, {})[row.key] = row.document
                    return tree or None
                return {row.key: row.document for row in rows} or None
            row = await db.get(TreeNode, (segments[0], segments[1]))
            if row is None:
                return None
            return get_in(row.document, segments[2:])

    async def write(self, path: str, value: Any | None) -> None:
        segments = _segments(path, "write")
        if not segments:
            raise StoreFailureError("Cannot write to the store root", "write")
        await self._ensure_schema()
        async with self.db.session() as db:
            await self._apply(db, segments, value)
            await db.commit()

    async def multi_write(self, updates: dict[str, Any | None]) -> None:
        if not updates:
            return
        resolved = [(_segments(p, "multi_write"), v) for p, v in updates.items()]
        try:
            check_disjoint(["/".join(s) for s, _ in resolved])
        except ValueError as e:
            raise StoreFailureError(str(e), "multi_write")
        await self._ensure_schema()
        async with self.db.session() as db:
            for segments, value in resolved:
                await self._apply(db, segments, value)
            await db.commit()

    async def query_equal(
        self, collection: str, field: str, value: Any,
    ) -> dict[str, Any]:
        segments = _segments(collection, "query")
        if len(segments) != 1:
            raise StoreFailureError(
                "Queries are supported on top-level collections only", "query",
                ErrorContext(path=collection),
            )
        await self._ensure_schema()
        async with self.db.session() as db:
            rows = (await db.execute(
                select(TreeNode).where(TreeNode.collection == segments[0]),
            )).scalars().all()
        return {
            row.key: row.document for row in rows
            if isinstance(row.document, dict) and row.document.get(field) == value
        }

    async def push_id(self, collection: str) -> str:
        _segments(collection, "push_id")
        return self._push_id()

    async def close(self) -> None:
        await self.db.dispose()

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                await self.db.create_schema()
                self._schema_ready = True

    async def _apply(
        self, db: AsyncSession, segments: list[str], value: Any | None,
    ) -> None:
        """Apply one path write inside the caller's transaction."""
        collection = segments[0]
        if len(segments) == 1:
            await db.execute(
                delete(TreeNode).where(TreeNode.collection == collection),
            )
            children = prune(value)
            if children is not None and not isinstance(children, dict):
                raise StoreFailureError(
                    "A collection can only hold keyed children", "write",
                    ErrorContext(path=collection),
                )
            for key, doc in (children or {}).items():
                try:
                    validate_segment(key)
                except ValueError as e:
                    raise StoreFailureError(str(e), "write", ErrorContext(path=collection))
                db.add(TreeNode(collection=collection, key=key, document=doc))
            await db.flush()
            return

        row = await db.get(TreeNode, (collection, segments[1]))
        if len(segments) == 2:
            document = prune(copy.deepcopy(value))
        else:
            holder = {"doc": copy.deepcopy(row.document)} if row is not None else {}
            set_in(holder, ["doc", *segments[2:]], value)
            document = holder.get("doc")

        if document is None:
            if row is not None:
                await db.delete(row)
        elif row is None:
            db.add(TreeNode(collection=collection, key=segments[1], document=document))
        else:
            row.document = document
        await db.flush()
