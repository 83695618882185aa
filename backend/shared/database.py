"""
Database client factory and query guard for Supabase.

Provides both service-role clients (for backend operations bypassing RLS)
and user-authenticated clients (for operations respecting RLS), plus
execute_query, the single place where store failures are translated into
the shared exception taxonomy.
"""

import asyncio
import logging
from typing import Callable, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from .config import get_settings
from .exceptions import (
    BeyondMeasureError,
    ForeignKeyViolationError,
    RowLevelSecurityError,
    UniqueViolationError,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL / PostgREST error codes the services act on
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INSUFFICIENT_PRIVILEGE = "42501"

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for backend operations that need full database access,
    such as profile lookups keyed by an already-authenticated account.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_user_client(access_token: str) -> Client:
    """
    Get Supabase client authenticated as a specific user.

    Use this for operations that should respect Row Level Security (RLS),
    such as wishlist writes that the store must attribute to the caller.

    Args:
        access_token: JWT access token from Supabase Auth

    Returns:
        Supabase client configured with user's access token
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )

    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )
    # Row-level security is evaluated against this token
    client.postgrest.auth(access_token)
    return client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None


def translate_api_error(error: APIError, table: str, operation: str) -> BeyondMeasureError:
    """
    Map a PostgREST error onto the shared exception taxonomy.

    Decisions are made on the error code only.
    """
    details = {"operation": operation, "store_code": error.code}

    if error.code == UNIQUE_VIOLATION:
        return UniqueViolationError(table, details)
    if error.code == FOREIGN_KEY_VIOLATION:
        return ForeignKeyViolationError(table, details)
    if error.code == INSUFFICIENT_PRIVILEGE:
        return RowLevelSecurityError(table, details)

    return UpstreamUnavailable(
        f"Data store rejected {operation}: {error.message}",
        service="supabase",
        details={**details, "table": table},
    )


async def execute_query(
    query: Callable[[], T],
    table: str,
    operation: str,
    timeout: Optional[float] = None,
) -> T:
    """
    Run a blocking Supabase query as an awaited, time-bounded call.

    The query runs in a worker thread. When the timeout elapses the caller
    gets UpstreamUnavailable even though the request may still complete in
    the background, so every write issued through here must be safe to
    land late.

    Args:
        query: Zero-argument callable that builds and executes the query
        table: Table (or RPC) name, for error details
        operation: Human-readable operation name, for error messages
        timeout: Seconds to wait; defaults to STORE_TIMEOUT_SECONDS

    Returns:
        Whatever the query returns (usually a postgrest APIResponse)

    Raises:
        UniqueViolationError: Insert rejected by a unique constraint
        ForeignKeyViolationError: Write referenced a missing row
        RowLevelSecurityError: Operation rejected by an RLS policy
        UpstreamUnavailable: Any other store or transport failure, or timeout
    """
    if timeout is None:
        timeout = get_settings().store_timeout_seconds

    try:
        return await asyncio.wait_for(asyncio.to_thread(query), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Data store timed out after {timeout}s during {operation}")
        raise UpstreamUnavailable(
            f"Data store timed out during {operation}",
            service="supabase",
            details={"operation": operation, "table": table, "timeout_seconds": timeout},
        )
    except APIError as e:
        raise translate_api_error(e, table, operation) from e
    except httpx.HTTPError as e:
        logger.warning(f"Data store transport error during {operation}: {e}")
        raise UpstreamUnavailable(
            f"Data store unreachable during {operation}",
            service="supabase",
            details={"operation": operation, "table": table, "cause": str(e)},
        ) from e
