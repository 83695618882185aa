"""
Donor account API endpoints.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_donor_service
from shared.models import AuthenticatedUser
from modules.profiles.models import DonorPreferencesUpdate, DonorProfile

from .interfaces import IDonorProvisioningService

router = APIRouter()


@router.get("/me", response_model=DonorProfile)
async def get_donor_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IDonorProvisioningService = Depends(get_donor_service),
) -> DonorProfile:
    """
    Get the current donor's profile, creating it on first use.
    """
    return await service.resolve_donor_profile(user)


@router.patch("/me", response_model=DonorProfile)
async def update_donor_preferences(
    update: DonorPreferencesUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IDonorProvisioningService = Depends(get_donor_service),
) -> DonorProfile:
    """Update donation preferences. Donation stats are not editable."""
    return await service.update_preferences(user, update)


@router.post("/me/session-change", status_code=204)
async def session_changed(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IDonorProvisioningService = Depends(get_donor_service),
) -> None:
    """
    Called by the client when its auth state changes (sign-in, sign-out,
    account switch). Drops cached donor profiles for every session of the
    account so the next lookup goes to the store.
    """
    service.handle_session_change(user.id)
