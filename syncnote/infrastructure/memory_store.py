"""In-Memory Tree Store — reference TreeStore backend over nested dicts.

Invariants:
    - Every mutation runs under one asyncio.Lock: multi_write is all-or-nothing
    - Reads return deep copies, so callers never alias stored state
    - Invalid paths and overlapping multi-path updates raise StoreFailureError
      before anything is written
    - Null values and empty parents vanish, as in the remote store

Design Decisions:
    - Used by tests and by store_backend="memory"; semantics are the contract
      the Firebase and SQL backends are checked against
"""

import asyncio
import copy
import logging
from typing import Any

from syncnote.core.errors import ErrorContext, StoreFailureError
from syncnote.core.paths import split_path, validate_segment
from syncnote.core.push_ids import PushIdGenerator
from syncnote.core.tree_ops import check_disjoint, get_in, set_in

logger = logging.getLogger(__name__)


def _segments(path: str, operation: str) -> list[str]:
    try:
        segments = [validate_segment(s) for s in split_path(path)]
    except ValueError as e:
        raise StoreFailureError(str(e), operation, ErrorContext(path=path))
    return segments


class InMemoryTreeStore:
    """Process-local tree store."""

    def __init__(self, initial: dict | None = None):
        self._root: dict = copy.deepcopy(initial) if initial else {}
        self._lock = asyncio.Lock()
        self._push_id = PushIdGenerator()

    async def read(self, path: str) -> Any | None:
        segments = _segments(path, "read")
        async with self._lock:
            if not segments:
                return copy.deepcopy(self._root) or None
            return get_in(self._root, segments)

    async def write(self, path: str, value: Any | None) -> None:
        segments = _segments(path, "write")
        if not segments:
            raise StoreFailureError("Cannot write to the store root", "write")
        async with self._lock:
            set_in(self._root, segments, value)

    async def multi_write(self, updates: dict[str, Any | None]) -> None:
        if not updates:
            return
        resolved = [(_segments(p, "multi_write"), v) for p, v in updates.items()]
        try:
            check_disjoint(["/".join(s) for s, _ in resolved])
        except ValueError as e:
            raise StoreFailureError(str(e), "multi_write")
        async with self._lock:
            staged = copy.deepcopy(self._root)
            for segments, value in resolved:
                set_in(staged, segments, value)
            self._root = staged

    async def query_equal(
        self, collection: str, field: str, value: Any,
    ) -> dict[str, Any]:
        children = await self.read(collection)
        if not isinstance(children, dict):
            return {}
        return {
            key: doc for key, doc in children.items()
            if isinstance(doc, dict) and doc.get(field) == value
        }

    async def push_id(self, collection: str) -> str:
        _segments(collection, "push_id")
        return self._push_id()

    async def close(self) -> None:
        logger.debug("In-memory store closed")

    def dump(self) -> dict:
        """Synchronous copy of the whole tree (tests and debugging)."""
        return copy.deepcopy(self._root)
