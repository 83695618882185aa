"""
Base exception classes for the Beyond Measure backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application: the API
layer maps each base class to one HTTP status.
"""

from typing import Optional, Any


class BeyondMeasureError(Exception):
    """
    Base exception for all Beyond Measure errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(BeyondMeasureError):
    """Resource not found."""

    pass


class ValidationError(BeyondMeasureError):
    """Input validation failed. No mutation was performed."""

    pass


class AuthenticationError(BeyondMeasureError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class PermissionDenied(BeyondMeasureError):
    """The acting account lacks rights for the requested action."""

    pass


class ConflictError(BeyondMeasureError):
    """The request conflicts with the current state of a resource."""

    pass


class UpstreamUnavailable(BeyondMeasureError):
    """
    The data store or identity provider failed or timed out.

    Presented to users as transient and retryable.
    """

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code or "UPSTREAM_UNAVAILABLE", details)
        self.service = service
        self.details["service"] = service


# -----------------------------------------------------------------------------
# Store outcomes
#
# Raised by repositories when the store rejects a write for a reason the
# services know how to act on. Translated from PostgREST error codes, never
# from message text.
# -----------------------------------------------------------------------------


class UniqueViolationError(ConflictError):
    """A unique constraint rejected an insert (PostgreSQL 23505)."""

    def __init__(self, table: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            f"Duplicate row rejected by {table}",
            code="UNIQUE_VIOLATION",
            details={"table": table, **(details or {})},
        )
        self.table = table


class ForeignKeyViolationError(ValidationError):
    """A write referenced a row that does not exist (PostgreSQL 23503)."""

    def __init__(self, table: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            f"Write to {table} references a row that does not exist",
            code="FOREIGN_KEY_VIOLATION",
            details={"table": table, **(details or {})},
        )
        self.table = table


class RowLevelSecurityError(PermissionDenied):
    """A row-level security policy rejected the operation (PostgreSQL 42501)."""

    def __init__(self, table: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            f"Row-level security rejected the operation on {table}",
            code="ROW_LEVEL_SECURITY",
            details={"table": table, **(details or {})},
        )
        self.table = table


class PreconditionFailedError(ConflictError):
    """A conditional update matched no row in its expected state."""

    def __init__(self, table: str, row_id: str, expected: list[str]):
        super().__init__(
            f"{table} row {row_id} is no longer in state {'/'.join(expected)}",
            code="PRECONDITION_FAILED",
            details={"table": table, "id": row_id, "expected": expected},
        )
        self.table = table
        self.row_id = row_id
        self.expected = expected
