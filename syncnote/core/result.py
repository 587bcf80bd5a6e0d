"""Result — success/failure sum type returned across every async boundary.

Invariants:
    - Exactly one of value/error is meaningful: ok is True iff error is None
    - unwrap() re-raises the carried SyncNoteError; never invents one

Design Decisions:
    - Failures travel as data: callers render error.to_dict() instead of
      catching exceptions around awaits
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from syncnote.core.errors import SyncNoteError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one public operation."""
    value: T | None = None
    error: SyncNoteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: SyncNoteError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]
