"""
Projects module interfaces.

The API layer depends on IProjectLifecycleService for every project
operation; the service depends on IProjectStore for persistence.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    CreateProjectRequest,
    Project,
    ProjectStatus,
    UpdateProjectRequest,
)


@runtime_checkable
class IProjectStore(Protocol):
    """Store operations for projects. Every method may raise UpstreamUnavailable."""

    async def create_project(self, teacher_id: str, request: CreateProjectRequest) -> Project:
        """Insert a new project in draft status."""
        ...

    async def link_categories(self, project_id: str, category_ids: list[str]) -> None:
        """Attach categories to a project."""
        ...

    async def get_project(self, project_id: str) -> Optional[Project]:
        """Get a project by ID."""
        ...

    async def list_projects(
        self,
        statuses: Optional[list[ProjectStatus]] = None,
        teacher_id: Optional[str] = None,
    ) -> list[Project]:
        """List projects, most recent first, optionally filtered."""
        ...

    async def update_project(
        self,
        project_id: str,
        request: UpdateProjectRequest,
        expected_status: ProjectStatus,
    ) -> Project:
        """
        Update content columns, conditional on the current status.

        Raises:
            PreconditionFailedError: If the project is no longer in expected_status
        """
        ...

    async def transition_status(
        self,
        project_id: str,
        from_status: ProjectStatus,
        to_status: ProjectStatus,
        note: Optional[str] = None,
        actor_profile_id: Optional[str] = None,
    ) -> Project:
        """
        Move a project between statuses, conditional on its current status.

        Raises:
            PreconditionFailedError: If the project is no longer in from_status
        """
        ...


@runtime_checkable
class IProjectLifecycleService(Protocol):
    """
    Interface for the project lifecycle.

    Every operation re-reads the actor's role and ownership from the store.
    """

    async def create_project(
        self,
        account: AuthenticatedUser,
        request: CreateProjectRequest,
    ) -> Project:
        """
        Create a draft project for a verified teacher.

        Raises:
            TeacherNotVerifiedError: If the teacher profile is missing or pending
            RoleNotAllowedError: If the caller is not a teacher
        """
        ...

    async def get_project(self, account: AuthenticatedUser, project_id: str) -> Project:
        """
        Get a project visible to the caller.

        Raises:
            ProjectNotFoundError: If missing or not visible
        """
        ...

    async def list_projects(
        self,
        account: AuthenticatedUser,
        status: Optional[str] = None,
    ) -> list[Project]:
        """List projects visible to the caller."""
        ...

    async def update_project(
        self,
        account: AuthenticatedUser,
        project_id: str,
        request: UpdateProjectRequest,
    ) -> Project:
        """
        Edit a draft project's content, by the owning teacher.

        Raises:
            ProjectNotFoundError: If the project does not exist
            PermissionDenied: If the caller is not the owning teacher
            ProjectNotEditableError: If the project is not a draft
        """
        ...

    async def submit_for_review(self, account: AuthenticatedUser, project_id: str) -> Project:
        """
        draft -> pending_review, by the owning teacher or an admin.

        Raises:
            InvalidTransition: If the project is not a draft
            PermissionDenied: If the caller may not submit it
        """
        ...

    async def review_project(
        self,
        account: AuthenticatedUser,
        project_id: str,
        status: str,
        note: Optional[str] = None,
    ) -> Project:
        """
        pending_review -> active | needs_revision | denied, by an admin.

        Raises:
            UnknownStatusError: If status is not a project status
            InvalidReviewDecisionError: If status is not one of the review decisions
            ReviewNoteRequiredError: If denying or requesting revision without a note
            InvalidTransition: If the project is not pending review
            PermissionDenied: If the caller is not an admin
        """
        ...

    async def return_to_draft(
        self,
        account: AuthenticatedUser,
        project_id: str,
        reopen_denied: Optional[bool] = None,
    ) -> Project:
        """
        needs_revision -> draft, and denied -> draft when reopening is allowed.

        Raises:
            InvalidTransition: If the project cannot be reopened
            PermissionDenied: If the caller does not own it
        """
        ...

    async def mark_funded(self, account: AuthenticatedUser, project_id: str) -> Project:
        """active -> funded, by an admin."""
        ...

    async def mark_completed(self, account: AuthenticatedUser, project_id: str) -> Project:
        """funded -> completed, by an admin."""
        ...
