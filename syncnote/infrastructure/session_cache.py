"""Session Cache — persisted current-user identity (id, username, email).

Invariants:
    - Values are plain strings; get() of a missing key returns None
    - JsonFileSessionCache rewrites the whole file on every set/clear
    - UserSession.is_logged_in is True only after login() and until logout()
"""

import json
import logging
import os
from pathlib import Path

from syncnote.core.store_protocols import SessionCache

logger = logging.getLogger(__name__)

KEY_USER_ID = "userId"
KEY_USERNAME = "username"
KEY_EMAIL = "email"
KEY_IS_LOGGED_IN = "isLoggedIn"


class InMemorySessionCache:
    def __init__(self):
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def clear(self) -> None:
        self._values.clear()


class JsonFileSessionCache:
    """Session cache backed by a small JSON file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._values = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Session file unreadable, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._values), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._save()

    def clear(self) -> None:
        self._values = {}
        self._save()


class UserSession:
    """Current-user view over a SessionCache."""

    def __init__(self, cache: SessionCache):
        self.cache = cache

    def login(self, account_id: str, username: str, email: str) -> None:
        self.cache.set(KEY_USER_ID, account_id)
        self.cache.set(KEY_USERNAME, username)
        self.cache.set(KEY_EMAIL, email)
        self.cache.set(KEY_IS_LOGGED_IN, "true")

    def logout(self) -> None:
        self.cache.clear()

    @property
    def is_logged_in(self) -> bool:
        return self.cache.get(KEY_IS_LOGGED_IN) == "true"

    @property
    def account_id(self) -> str | None:
        return self.cache.get(KEY_USER_ID)

    @property
    def username(self) -> str | None:
        return self.cache.get(KEY_USERNAME)

    @property
    def email(self) -> str | None:
        return self.cache.get(KEY_EMAIL)
