"""
Project repository for database access.

Encapsulates all Supabase queries and data mapping for project tables:
- projects
- project_categories
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Any

from shared.exceptions import PreconditionFailedError
from shared.repository import BaseRepository
from .models import (
    CreateProjectRequest,
    Project,
    ProjectStatus,
    REVIEW_DECISIONS,
    UpdateProjectRequest,
)


class ProjectRepository(BaseRepository[Project]):
    """
    Repository for project data access.

    Note: This repository does NOT perform authorization checks.
    The lifecycle service is responsible for roles and ownership.
    """

    # -------------------------------------------------------------------------
    # Project CRUD operations
    # -------------------------------------------------------------------------

    async def create_project(self, teacher_id: str, request: CreateProjectRequest) -> Project:
        data = {
            "teacher_id": teacher_id,
            "title": request.title,
            "description": request.description,
            "student_impact": request.student_impact,
            "funding_goal": float(request.funding_goal),
            "end_date": request.end_date.isoformat() if request.end_date else None,
            "main_image_url": request.main_image_url or None,
            "status": ProjectStatus.DRAFT.value,
            "current_amount": 0,
            "donor_count": 0,
        }
        result = await self._run(
            lambda: self._db.table("projects").insert(data).execute(),
            table="projects",
            operation="create project",
        )
        return self._map_to_project(result.data[0])

    async def link_categories(self, project_id: str, category_ids: list[str]) -> None:
        if not category_ids:
            return
        rows = [
            {"project_id": project_id, "category_id": category_id}
            for category_id in dict.fromkeys(category_ids)
        ]
        await self._run(
            lambda: self._db.table("project_categories").insert(rows).execute(),
            table="project_categories",
            operation="link project categories",
        )

    async def get_project(self, project_id: str) -> Optional[Project]:
        result = await self._run(
            lambda: self._db.table("projects").select("*").eq("id", project_id).execute(),
            table="projects",
            operation="get project",
        )
        if not result.data:
            return None
        return self._map_to_project(result.data[0])

    async def list_projects(
        self,
        statuses: Optional[list[ProjectStatus]] = None,
        teacher_id: Optional[str] = None,
    ) -> list[Project]:
        def query():
            q = self._db.table("projects").select("*")
            if teacher_id:
                q = q.eq("teacher_id", teacher_id)
            if statuses:
                stored = [value for status in statuses for value in status.stored_values]
                q = q.in_("status", stored)
            return q.order("created_at", desc=True).execute()

        result = await self._run(query, table="projects", operation="list projects")
        return [self._map_to_project(row) for row in result.data]

    async def update_project(
        self,
        project_id: str,
        request: UpdateProjectRequest,
        expected_status: ProjectStatus,
    ) -> Project:
        """
        Update a project's content while it is still in expected_status.

        Raises:
            PreconditionFailedError: If the project left expected_status
        """
        data: dict[str, Any] = request.model_dump(mode="json", exclude_none=True)
        if request.funding_goal is not None:
            data["funding_goal"] = float(request.funding_goal)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()

        result = await self._run(
            lambda: self._db.table("projects")
            .update(data)
            .eq("id", project_id)
            .in_("status", expected_status.stored_values)
            .execute(),
            table="projects",
            operation="update project",
        )

        if not result.data:
            raise PreconditionFailedError("projects", project_id, expected_status.stored_values)
        return self._map_to_project(result.data[0])

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def transition_status(
        self,
        project_id: str,
        from_status: ProjectStatus,
        to_status: ProjectStatus,
        note: Optional[str] = None,
        actor_profile_id: Optional[str] = None,
    ) -> Project:
        """
        Conditionally update a project's status.

        The update only matches the row while it is still in from_status
        (under any of its stored names), so of two racing writers exactly
        one succeeds.
        """
        now = datetime.now(timezone.utc).isoformat()
        data: dict[str, Any] = {
            "status": to_status.value,
            "updated_at": now,
        }

        if to_status == ProjectStatus.PENDING_REVIEW:
            data["submitted_at"] = now
        elif to_status in REVIEW_DECISIONS:
            data["reviewed_at"] = now
            data["reviewed_by"] = actor_profile_id
            data["review_notes"] = note

        result = await self._run(
            lambda: self._db.table("projects")
            .update(data)
            .eq("id", project_id)
            .in_("status", from_status.stored_values)
            .execute(),
            table="projects",
            operation=f"move project to {to_status.value}",
        )

        if not result.data:
            raise PreconditionFailedError("projects", project_id, from_status.stored_values)
        return self._map_to_project(result.data[0])

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_project(self, data: dict[str, Any]) -> Project:
        """Map database row to Project model."""
        return Project(
            id=str(data["id"]),
            teacher_id=str(data["teacher_id"]),
            title=data["title"],
            description=data.get("description") or "",
            student_impact=data.get("student_impact") or "",
            funding_goal=Decimal(str(data.get("funding_goal") or 0)),
            current_amount=Decimal(str(data.get("current_amount") or 0)),
            donor_count=data.get("donor_count") or 0,
            status=ProjectStatus(data["status"]),
            main_image_url=data.get("main_image_url"),
            review_notes=data.get("review_notes"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            submitted_at=data.get("submitted_at"),
            reviewed_at=data.get("reviewed_at"),
            end_date=data.get("end_date"),
        )
