"""Store Factory — builds the configured TreeStore backend from settings."""

import logging

from syncnote.config import Settings
from syncnote.core.domain_types import StoreBackend
from syncnote.core.store_protocols import SessionCache, TreeStore
from syncnote.infrastructure.firebase_store import FirebaseTreeStore
from syncnote.infrastructure.memory_store import InMemoryTreeStore
from syncnote.infrastructure.session_cache import (
    InMemorySessionCache, JsonFileSessionCache,
)
from syncnote.infrastructure.sql_store import SqlTreeStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> TreeStore:
    backend = settings.store_backend
    logger.info(f"Using {backend.value} tree store")
    if backend is StoreBackend.FIREBASE:
        return FirebaseTreeStore(
            settings.firebase_database_url,
            auth_token=settings.firebase_auth_token,
            max_retries=settings.firebase_max_retries,
            base_delay_ms=settings.firebase_base_delay_ms,
            max_delay_ms=settings.firebase_max_delay_ms,
            timeout_seconds=settings.firebase_timeout_seconds,
        )
    if backend is StoreBackend.SQL:
        return SqlTreeStore(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    return InMemoryTreeStore()


def build_session_cache(settings: Settings) -> SessionCache:
    if settings.session_file:
        return JsonFileSessionCache(settings.session_file)
    return InMemorySessionCache()
