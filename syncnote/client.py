"""SyncNote Client — wires every component over one TreeStore for a process lifetime.

Invariants:
    - All components share the same store instance and clock
    - sign_in() stores the session only after authenticate succeeded
    - close() flushes pending activity writes before closing the store

Design Decisions:
    - Composition root instead of a DI container: the graph is small and fixed
    - Async context manager: build on enter, release on exit
"""

import logging

from syncnote.config import Settings, get_settings
from syncnote.core.result import Result
from syncnote.core.store_protocols import SessionCache, TreeStore
from syncnote.core.timestamps import Clock, now_ms
from syncnote.infrastructure.observability import setup_logging
from syncnote.infrastructure.session_cache import InMemorySessionCache, UserSession
from syncnote.infrastructure.store_factory import build_session_cache, build_store
from syncnote.schemas.account import Account
from syncnote.services.activity_log import ActivityLog
from syncnote.services.aggregation import AggregationEngine
from syncnote.services.categories import CategoryStore
from syncnote.services.credential_store import CredentialStore
from syncnote.services.note_actions import NoteActions
from syncnote.services.note_repository import NoteRepository
from syncnote.services.sharing import SharingGraph

logger = logging.getLogger(__name__)


class SyncNoteClient:
    """Entry point for UI code: one attribute per component."""

    def __init__(
        self,
        store: TreeStore,
        session_cache: SessionCache | None = None,
        settings: Settings | None = None,
        clock: Clock = now_ms,
    ):
        settings = settings or Settings()
        self.settings = settings
        self.store = store
        self.session = UserSession(session_cache or InMemorySessionCache())

        self.credentials = CredentialStore(store, clock)
        self.notes = NoteRepository(store, clock)
        self.sharing = SharingGraph(store, clock, link_length=settings.share_link_length)
        self.activity = ActivityLog(store, clock)
        self.categories = CategoryStore(store, clock)
        self.aggregation = AggregationEngine(
            store, self.notes, self.credentials,
            unknown_user_label=settings.unknown_user_label,
            unavailable_note_label=settings.unavailable_note_label,
        )
        self.actions = NoteActions(self.notes, self.sharing, self.credentials, self.activity)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SyncNoteClient":
        settings = settings or get_settings()
        if not logging.root.handlers:
            setup_logging(settings.log_level, settings.log_format)
        return cls(
            build_store(settings), build_session_cache(settings), settings=settings,
        )

    async def sign_in(self, username: str, password: str) -> Result[Account]:
        result = await self.credentials.authenticate(username, password)
        if result.ok:
            account = result.value
            self.session.login(account.id, account.username, account.email)
            logger.info("Signed in", extra={"account_id": account.id})
        return result

    def sign_out(self) -> None:
        self.session.logout()

    async def close(self) -> None:
        await self.activity.flush()
        await self.store.close()

    async def __aenter__(self) -> "SyncNoteClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
