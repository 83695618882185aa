"""
Project API endpoints.

Creation, listing, and every lifecycle transition. Authorization is
decided by the lifecycle service against the caller's stored role.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from api.middleware.auth import get_current_user
from api.dependencies import get_project_service
from shared.models import AuthenticatedUser

from .interfaces import IProjectLifecycleService
from .models import (
    CreateProjectRequest,
    Project,
    ProjectListResponse,
    ReturnToDraftRequest,
    ReviewProjectRequest,
    UpdateProjectRequest,
)

router = APIRouter()


@router.post("", response_model=Project, status_code=201)
async def create_project(
    request: CreateProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    """
    Create a new project in 'draft' status.

    Requires a verified teacher account.
    """
    return await service.create_project(user, request)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    status: Optional[str] = Query(default=None, description="Filter by status"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> ProjectListResponse:
    """
    List projects visible to the current user.

    Admins get the review queue unless a status is given.
    """
    projects = await service.list_projects(user, status=status)
    return ProjectListResponse(projects=projects, total=len(projects))


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    return await service.get_project(user, project_id)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    """
    Edit a draft project.

    Projects sent back for revision are returned to draft first.
    """
    return await service.update_project(user, project_id, request)


@router.post("/{project_id}/submit", response_model=Project)
async def submit_project(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    """Submit a draft for admin review."""
    return await service.submit_for_review(user, project_id)


@router.post("/{project_id}/review", response_model=Project)
async def review_project(
    project_id: str,
    request: ReviewProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    """
    Approve, deny, or request revisions on a pending project.

    Denials and revision requests must include a note.
    """
    return await service.review_project(user, project_id, request.status, note=request.note)


@router.post("/{project_id}/return-to-draft", response_model=Project)
async def return_to_draft(
    project_id: str,
    request: Optional[ReturnToDraftRequest] = None,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    """Reopen a returned or denied project for editing."""
    reopen_denied = request.reopen_denied if request else None
    return await service.return_to_draft(user, project_id, reopen_denied=reopen_denied)


@router.post("/{project_id}/funded", response_model=Project)
async def mark_funded(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    return await service.mark_funded(user, project_id)


@router.post("/{project_id}/completed", response_model=Project)
async def mark_completed(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectLifecycleService = Depends(get_project_service),
) -> Project:
    return await service.mark_completed(user, project_id)
