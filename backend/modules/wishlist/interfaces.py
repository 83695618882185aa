"""
Wishlist module interfaces.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    WishlistProject,
    WishlistResponse,
    WishlistStatus,
    WishlistToggleResult,
)


@runtime_checkable
class IWishlistStore(Protocol):
    """
    Store operations for wishlist entries.

    Writes are subject to row-level security: the store rejects entries
    whose donor profile does not belong to the authenticated account.
    """

    async def exists(self, donor_profile_id: str, project_id: str) -> bool:
        ...

    async def add(self, donor_profile_id: str, project_id: str) -> None:
        """
        Raises:
            UniqueViolationError: If the pair is already present
            RowLevelSecurityError: If the donor profile is not the caller's
        """
        ...

    async def remove(self, donor_profile_id: str, project_id: str) -> None:
        """
        Raises:
            RowLevelSecurityError: If the donor profile is not the caller's
        """
        ...

    async def list_project_ids(self, donor_profile_id: str) -> list[str]:
        ...

    async def get_projects(self, project_ids: list[str]) -> list[WishlistProject]:
        ...


@runtime_checkable
class IWishlistCoordinator(Protocol):
    """Interface for donor wishlist operations."""

    async def toggle(self, account: AuthenticatedUser, project_id: str) -> WishlistToggleResult:
        """
        Add the project if absent, remove it if present.

        Resolves the donor profile first. A row-level security rejection
        triggers one reconciliation and one retry.

        Raises:
            DonorProfileUnavailable: If no donor profile can be resolved
            WishlistPermissionDenied: If the retry is rejected as well
            UpstreamUnavailable: If the store fails or times out
        """
        ...

    async def is_in_wishlist(self, account: AuthenticatedUser, project_id: str) -> WishlistStatus:
        ...

    async def list_wishlist(self, account: AuthenticatedUser) -> WishlistResponse:
        ...
