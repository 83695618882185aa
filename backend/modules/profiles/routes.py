"""
Account API endpoints.

Sign-up provisioning, the current profile, and teacher verification.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_profile_service
from shared.models import AuthenticatedUser

from .interfaces import IProfileService
from .models import Profile, RegistrationRequest, TeacherProfile

router = APIRouter()


@router.post("", response_model=Profile)
async def register_account(
    request: RegistrationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> Profile:
    """
    Create the profile rows for a newly signed-up account.

    Safe to retry: an existing profile for the account is returned.
    """
    return await service.register_account(user, request)


@router.get("/me", response_model=Profile)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> Profile:
    """Get the current user's profile."""
    return await service.get_current_profile(user)


@router.post("/teachers/{teacher_profile_id}/activate", response_model=TeacherProfile)
async def activate_teacher(
    teacher_profile_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> TeacherProfile:
    """Mark a pending teacher as verified. Admin only."""
    return await service.activate_teacher(user, teacher_profile_id)
