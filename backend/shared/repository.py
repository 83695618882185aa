"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and routing every query through execute_query so
that each store call is an awaited, time-bounded suspension point.
"""

from typing import Any, Callable, Optional, TypeVar, Generic
from supabase import Client

from .database import execute_query


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Guarded query execution via self._run
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class ProjectRepository(BaseRepository[Project]):
            async def get_by_id(self, project_id: str) -> Optional[Project]:
                result = await self._run(
                    lambda: self._db.table("projects").select("*").eq("id", project_id).execute(),
                    table="projects",
                    operation="get project",
                )
                if not result.data:
                    return None
                return self._map_to_project(result.data[0])
    """

    def __init__(self, db: Client, timeout: Optional[float] = None) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
            timeout: Per-call timeout in seconds. Defaults to the
                configured store timeout.
        """
        self._db = db
        self._timeout = timeout

    async def _run(
        self,
        query: Callable[[], Any],
        table: str,
        operation: str,
    ) -> Any:
        """Execute a blocking Supabase query under the store guard."""
        return await execute_query(
            query,
            table=table,
            operation=operation,
            timeout=self._timeout,
        )
