"""Root conftest — shared fixtures: clock, stores, client, seeded accounts.

Invariants:
    - Every test gets a fresh InMemoryTreeStore
    - The clock is deterministic and strictly increasing (1 second per call)
    - FlakyStore raises StoreFailureError for the operations/paths a test arms

Design Decisions:
    - Settings built explicitly so a developer's .env never leaks into tests
"""

import os

import pytest

from syncnote.config import Settings
from syncnote.core.errors import StoreFailureError
from syncnote.client import SyncNoteClient
from syncnote.infrastructure.memory_store import InMemoryTreeStore

# Ensure tests never talk to a real database by accident
os.environ.setdefault("SYNCNOTE_STORE_BACKEND", "memory")


class FakeClock:
    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


class FlakyStore:
    """Wraps a TreeStore; fails reads/writes under the armed path prefixes."""

    def __init__(self, inner):
        self.inner = inner
        self.fail_read_prefixes: set[str] = set()
        self.fail_writes = False
        self.fail_queries = False

    def _check_read(self, path: str):
        if any(path.startswith(p) for p in self.fail_read_prefixes):
            raise StoreFailureError("injected read failure", "read")

    async def read(self, path):
        self._check_read(path)
        return await self.inner.read(path)

    async def write(self, path, value):
        if self.fail_writes:
            raise StoreFailureError("injected write failure", "write")
        await self.inner.write(path, value)

    async def multi_write(self, updates):
        if self.fail_writes:
            raise StoreFailureError("injected write failure", "multi_write")
        await self.inner.multi_write(updates)

    async def query_equal(self, collection, field, value):
        if self.fail_queries:
            raise StoreFailureError("injected query failure", "query_equal")
        return await self.inner.query_equal(collection, field, value)

    async def push_id(self, collection):
        return await self.inner.push_id(collection)

    async def close(self):
        await self.inner.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return InMemoryTreeStore()


@pytest.fixture
def store(memory_store):
    """Flaky wrapper over the memory store; disarmed unless a test arms it."""
    return FlakyStore(memory_store)


@pytest.fixture
def settings():
    return Settings(_env_file=None, store_backend="memory")


@pytest.fixture
async def client(store, settings, clock):
    c = SyncNoteClient(store, settings=settings, clock=clock)
    yield c
    await c.close()


@pytest.fixture
async def alice(client):
    result = await client.credentials.register(
        "alice", "a@x.com", "secret1", "Pet?", "Rex",
    )
    return result.unwrap()


@pytest.fixture
async def bob(client):
    result = await client.credentials.register(
        "bob", "bob@x.com", "secret2", "City?", "Paris",
    )
    return result.unwrap()


@pytest.fixture
async def carol(client):
    result = await client.credentials.register("carol", "carol@x.com", "secret3")
    return result.unwrap()
