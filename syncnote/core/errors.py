"""Error Hierarchy — typed, categorized exceptions for every SyncNote failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (not found, conflict, credentials, share links) are recoverable;
      StoreFailureError is the only infrastructure error and always carries a message
    - to_dict() produces the envelope a caller renders as a user-facing message
    - BadCredentialsError never says which half of the credentials was wrong

Design Decisions:
    - Single hierarchy with SyncNoteError base: the Result boundary catches all
      of them in one except clause
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories matching the failure taxonomy."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_CREDENTIALS = "bad_credentials"
    INVALID = "invalid"
    VALIDATION = "validation"
    STORE_FAILURE = "store_failure"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    account_id: str | None = None
    note_id: str | None = None
    path: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class SyncNoteError(Exception):
    """Base exception for all SyncNote errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING, ErrorSeverity.ERROR)

    def to_dict(self) -> dict:
        """Convert to the standard error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "account_id": self.context.account_id,
                    "note_id": self.context.note_id,
                    "path": self.context.path,
                },
            }
        }


# ─── Domain Errors ──────────────────────────────────────────────

class NotFoundError(SyncNoteError):
    """Entity or path is absent from the store."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(SyncNoteError):
    """Uniqueness violation."""
    def __init__(
        self, message: str, code: str = "CONFLICT", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT, ErrorSeverity.ERROR, context,
        )


class UsernameTakenError(ConflictError):
    def __init__(self, username: str, context: ErrorContext | None = None):
        super().__init__("Username already exists", "USERNAME_TAKEN", context)
        self.username = username


class EmailTakenError(ConflictError):
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__("Email already registered", "EMAIL_TAKEN", context)
        self.email = email


class CategoryExistsError(ConflictError):
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__("Category already exists", "CATEGORY_EXISTS", context)
        self.name = name


class BadCredentialsError(SyncNoteError):
    """Username/password pair did not verify."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid username or password",
            "BAD_CREDENTIALS", ErrorCategory.BAD_CREDENTIALS,
            ErrorSeverity.ERROR, context,
        )


class InvalidShareLinkError(SyncNoteError):
    """Share-link token is unknown or malformed."""
    def __init__(
        self, code: str, message: str = "Invalid share link",
        error_code: str = "INVALID_SHARE_LINK", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, error_code, ErrorCategory.INVALID,
            ErrorSeverity.ERROR, context,
        )
        self.link_code = code


class ExpiredShareLinkError(InvalidShareLinkError):
    """Share-link token exists but has been deactivated."""
    def __init__(self, code: str, context: ErrorContext | None = None):
        super().__init__(
            code, "Share link has expired", "EXPIRED_SHARE_LINK", context,
        )


class ValidationError(SyncNoteError):
    """Caller supplied a value the domain cannot accept."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


# ─── Infrastructure Errors ──────────────────────────────────────

class StoreFailureError(SyncNoteError):
    """Transport or backend failure of the tree store."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_FAILURE", ErrorCategory.STORE_FAILURE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
