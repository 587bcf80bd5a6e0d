"""Boundary Protocols — contracts between the consistency layer and its backends.

Invariants:
    - Core and services NEVER import a concrete backend — they see these Protocols only
    - read() returns a deep copy (point-in-time snapshot) or None when absent
    - write(path, None) and multi_write({path: None}) delete
    - multi_write is atomic across the listed paths and nothing else
    - query_equal returns {key: document} for direct children whose field matches
    - Every backend failure surfaces as StoreFailureError

Design Decisions:
    - Protocol over ABC: structural subtyping, backends share no base class
    - Async in Protocol: every backend does IO (or may, behind the same contract)
"""

from typing import Any, Protocol


class TreeStore(Protocol):
    """Hierarchical, schemaless key-value store addressed by slash paths."""
    async def read(self, path: str) -> Any | None: ...
    async def write(self, path: str, value: Any | None) -> None: ...
    async def multi_write(self, updates: dict[str, Any | None]) -> None: ...
    async def query_equal(
        self, collection: str, field: str, value: Any,
    ) -> dict[str, Any]: ...
    async def push_id(self, collection: str) -> str: ...
    async def close(self) -> None: ...


class SessionCache(Protocol):
    """Scalar string cache that survives restarts of the client."""
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def clear(self) -> None: ...
