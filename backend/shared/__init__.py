"""
Shared infrastructure for Beyond Measure backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory and guarded query execution
- exceptions: Base exception classes
- repository: Base repository

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import (
    execute_query,
    get_supabase_client,
    get_supabase_user_client,
    reset_client_cache,
)
from .exceptions import (
    BeyondMeasureError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    PermissionDenied,
    ConflictError,
    UpstreamUnavailable,
    UniqueViolationError,
    ForeignKeyViolationError,
    RowLevelSecurityError,
    PreconditionFailedError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "execute_query",
    "get_supabase_client",
    "get_supabase_user_client",
    "reset_client_cache",
    "BeyondMeasureError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDenied",
    "ConflictError",
    "UpstreamUnavailable",
    "UniqueViolationError",
    "ForeignKeyViolationError",
    "RowLevelSecurityError",
    "PreconditionFailedError",
    "AuthenticatedUser",
]
