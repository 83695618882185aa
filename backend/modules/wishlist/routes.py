"""
Wishlist API endpoints.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_container
from shared.models import AuthenticatedUser

from .interfaces import IWishlistCoordinator
from .models import WishlistResponse, WishlistStatus, WishlistToggleResult

router = APIRouter()


def get_wishlist_coordinator(
    user: AuthenticatedUser = Depends(get_current_user),
) -> IWishlistCoordinator:
    """FastAPI dependency for a wishlist coordinator scoped to the caller."""
    return get_container().wishlist_for(user)


@router.get("", response_model=WishlistResponse)
async def list_wishlist(
    user: AuthenticatedUser = Depends(get_current_user),
    coordinator: IWishlistCoordinator = Depends(get_wishlist_coordinator),
) -> WishlistResponse:
    """List the projects on the current donor's wishlist."""
    return await coordinator.list_wishlist(user)


@router.get("/{project_id}", response_model=WishlistStatus)
async def get_wishlist_status(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    coordinator: IWishlistCoordinator = Depends(get_wishlist_coordinator),
) -> WishlistStatus:
    return await coordinator.is_in_wishlist(user, project_id)


@router.post("/{project_id}/toggle", response_model=WishlistToggleResult)
async def toggle_wishlist(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    coordinator: IWishlistCoordinator = Depends(get_wishlist_coordinator),
) -> WishlistToggleResult:
    """
    Add the project to the wishlist, or remove it if already there.
    """
    return await coordinator.toggle(user, project_id)
