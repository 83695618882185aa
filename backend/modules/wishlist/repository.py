"""
Wishlist repository for database access.

Encapsulates Supabase queries for the donor_wishlists table and the project
summaries shown on the wishlist page. Built on a user-scoped client so that
row-level security sees the caller.
"""

from decimal import Decimal
from typing import Any

from modules.projects.models import ProjectStatus
from shared.repository import BaseRepository
from .models import WishlistProject


class WishlistRepository(BaseRepository[WishlistProject]):
    """Repository for wishlist data access."""

    async def exists(self, donor_profile_id: str, project_id: str) -> bool:
        result = await self._run(
            lambda: self._db.table("donor_wishlists")
            .select("id")
            .match({"donor_id": donor_profile_id, "project_id": project_id})
            .execute(),
            table="donor_wishlists",
            operation="check wishlist entry",
        )
        return bool(result.data)

    async def add(self, donor_profile_id: str, project_id: str) -> None:
        data = {"donor_id": donor_profile_id, "project_id": project_id}
        await self._run(
            lambda: self._db.table("donor_wishlists").insert(data).execute(),
            table="donor_wishlists",
            operation="add wishlist entry",
        )

    async def remove(self, donor_profile_id: str, project_id: str) -> None:
        await self._run(
            lambda: self._db.table("donor_wishlists")
            .delete()
            .match({"donor_id": donor_profile_id, "project_id": project_id})
            .execute(),
            table="donor_wishlists",
            operation="remove wishlist entry",
        )

    async def list_project_ids(self, donor_profile_id: str) -> list[str]:
        result = await self._run(
            lambda: self._db.table("donor_wishlists")
            .select("project_id")
            .eq("donor_id", donor_profile_id)
            .execute(),
            table="donor_wishlists",
            operation="list wishlist",
        )
        return [str(row["project_id"]) for row in result.data]

    async def get_projects(self, project_ids: list[str]) -> list[WishlistProject]:
        if not project_ids:
            return []
        result = await self._run(
            lambda: self._db.table("projects")
            .select(
                "id, title, description, student_impact, funding_goal, "
                "current_amount, main_image_url, status"
            )
            .in_("id", project_ids)
            .execute(),
            table="projects",
            operation="load wishlisted projects",
        )
        return [self._map_to_wishlist_project(row) for row in result.data]

    def _map_to_wishlist_project(self, data: dict[str, Any]) -> WishlistProject:
        """Map projects row to WishlistProject model."""
        return WishlistProject(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            student_impact=data.get("student_impact") or "",
            funding_goal=Decimal(str(data.get("funding_goal") or 0)),
            current_amount=Decimal(str(data.get("current_amount") or 0)),
            main_image_url=data.get("main_image_url"),
            status=ProjectStatus(data["status"]),
        )
