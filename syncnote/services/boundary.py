"""Async Boundary — converts raised errors into delivered data at every public operation.

Invariants:
    - A decorated coroutine never raises (except CancelledError)
    - SyncNoteError passes through as Result.failure unchanged
    - Any other exception becomes StoreFailureError(operation) and is logged with traceback
    - returns_bool collapses every failure to False

Design Decisions:
    - Services raise typed errors internally (read-verify-write reads top-down);
      only the public edge converts, in one place
"""

import functools
import logging
from typing import Awaitable, Callable, ParamSpec, TypeVar

from syncnote.core.errors import ErrorSeverity, StoreFailureError, SyncNoteError
from syncnote.core.result import Result

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def _as_sync_note_error(e: Exception, operation: str) -> SyncNoteError:
    if isinstance(e, SyncNoteError):
        level = (
            logging.ERROR if e.severity is ErrorSeverity.CRITICAL else logging.INFO
        )
        logger.log(
            level, f"{operation} failed: {e.message}",
            extra={"operation": operation, "error_code": e.code},
        )
        return e
    logger.error(
        f"Unexpected error in {operation}: {e}",
        exc_info=True, extra={"operation": operation},
    )
    return StoreFailureError(str(e), operation)


def returns_result(
    operation: str,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T]]]]:
    """Wrap a raising coroutine so it resolves to Result[T]."""
    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return Result.success(await fn(*args, **kwargs))
            except Exception as e:
                return Result.failure(_as_sync_note_error(e, operation))
        return wrapper
    return decorator


def returns_bool(
    operation: str,
) -> Callable[[Callable[P, Awaitable[bool]]], Callable[P, Awaitable[bool]]]:
    """Wrap a raising coroutine so it resolves to True/False."""
    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return bool(await fn(*args, **kwargs))
            except Exception as e:
                _as_sync_note_error(e, operation)
                return False
        return wrapper
    return decorator
