"""Firebase Tree Store — Realtime Database REST backend with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection): max N retries with exponential backoff
    - Client errors (4xx except 429) and timeouts: immediate failure, no retry
    - All failures mapped to StoreFailureError (core/errors.py)
    - multi_write is a single PATCH on the database root: atomic server-side

Design Decisions:
    - httpx.AsyncClient with injectable transport: tests drive the real request
      path through httpx.MockTransport
    - Push ids generated client-side, as the Firebase SDKs do
    - query_equal needs an ".indexOn" rule for the field on the server
      (noteId, userId, sharedWithUserId); unindexed queries fail with 400
"""

import asyncio
import json
import logging
import random
from typing import Any

import httpx

from syncnote.core.errors import ErrorContext, StoreFailureError
from syncnote.core.paths import normalize_path
from syncnote.core.push_ids import PushIdGenerator
from syncnote.core.tree_ops import check_disjoint

logger = logging.getLogger(__name__)

_RATE_LIMITED = 429


class FirebaseTreeStore:
    """TreeStore over the Firebase Realtime Database REST API."""

    def __init__(
        self,
        database_url: str,
        auth_token: str | None = None,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 30_000,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=database_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )
        self.auth_token = auth_token
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._push_id = PushIdGenerator()

    # ─── TreeStore ──────────────────────────────────────────────

    async def read(self, path: str) -> Any | None:
        return await self._request("GET", self._url(path, "read"), operation="read")

    async def write(self, path: str, value: Any | None) -> None:
        url = self._url(path, "write")
        if url == "/.json":
            raise StoreFailureError("Cannot write to the store root", "write")
        if value is None:
            await self._request("DELETE", url, operation="write")
        else:
            await self._request("PUT", url, operation="write", body=value)

    async def multi_write(self, updates: dict[str, Any | None]) -> None:
        if not updates:
            return
        try:
            paths = [normalize_path(p) for p in updates]
            check_disjoint(paths)
        except ValueError as e:
            raise StoreFailureError(str(e), "multi_write")
        body = {p: v for p, v in zip(paths, updates.values())}
        await self._request("PATCH", "/.json", operation="multi_write", body=body)

    async def query_equal(
        self, collection: str, field: str, value: Any,
    ) -> dict[str, Any]:
        result = await self._request(
            "GET", self._url(collection, "query"),
            operation="query",
            params={"orderBy": json.dumps(field), "equalTo": json.dumps(value)},
        )
        return result if isinstance(result, dict) else {}

    async def push_id(self, collection: str) -> str:
        self._url(collection, "push_id")
        return self._push_id()

    async def close(self) -> None:
        await self.client.aclose()

    # ─── Transport ──────────────────────────────────────────────

    def _url(self, path: str, operation: str) -> str:
        try:
            normalized = normalize_path(path)
        except ValueError as e:
            raise StoreFailureError(str(e), operation, ErrorContext(path=path))
        return f"/{normalized}.json" if normalized else "/.json"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        body: Any = None,
        params: dict | None = None,
    ) -> Any:
        """Send one request with automatic retry on transient failures."""
        params = dict(params or {})
        if self.auth_token:
            params["auth"] = self.auth_token
        context = ErrorContext(path=url)

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.request(
                    method, url, params=params,
                    content=None if body is None else json.dumps(body),
                    headers={"Content-Type": "application/json"},
                )
            except httpx.TimeoutException:
                raise StoreFailureError("request timed out", operation, context)
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, operation, context)
                continue

            if response.status_code == _RATE_LIMITED:
                await self._handle_rate_limit(response, attempt, operation, context)
                continue
            if response.status_code >= 500:
                await self._handle_transient_error(
                    f"HTTP {response.status_code}", attempt, operation, context,
                )
                continue
            if response.status_code >= 400:
                raise StoreFailureError(
                    self._error_message(response), operation, context,
                )

            logger.debug(
                "Store request ok",
                extra={"operation": operation, "path": url, "attempt": attempt + 1},
            )
            if method == "DELETE" or not response.content:
                return None
            return response.json()

        raise StoreFailureError("retries exhausted", operation, context)

    async def _handle_rate_limit(
        self, response: httpx.Response, attempt: int, operation: str,
        context: ErrorContext,
    ) -> None:
        """Handle rate limit error with retry or raise."""
        if attempt >= self.max_retries:
            raise StoreFailureError(
                "rate limit exceeded after retries", operation, context,
            )
        delay = self._extract_retry_after(response) or self._backoff(attempt)
        logger.warning(
            f"Store rate limited, retry after {delay}ms (attempt {attempt + 1})",
            extra={"operation": operation, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: object, attempt: int, operation: str, context: ErrorContext,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise StoreFailureError(
                f"transient failure after {self.max_retries} retries: {e}",
                operation, context,
            )
        delay = self._backoff(attempt)
        logger.warning(
            f"Transient store error, retry after {delay}ms: {e}",
            extra={"operation": operation, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    @staticmethod
    def _extract_retry_after(response: httpx.Response) -> int | None:
        """Extract Retry-After header (returns milliseconds)."""
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(payload, dict) and payload.get("error"):
            return f"HTTP {response.status_code}: {payload['error']}"
        return f"HTTP {response.status_code}"
