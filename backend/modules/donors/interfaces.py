"""
Donors module interface.

The wishlist module depends on IDonorProvisioningService to turn an acting
account into a DonorProfile it can act for.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser
from modules.profiles.models import DonorPreferencesUpdate, DonorProfile


@runtime_checkable
class IDonorProvisioningService(Protocol):
    """Interface for donor profile provisioning and reconciliation."""

    async def resolve_donor_profile(self, account: AuthenticatedUser) -> DonorProfile:
        """
        Get or create the donor profile for an account. Idempotent.

        Order: session cache, then the store, then creation. A lost
        creation race re-fetches the winner's row instead of failing.

        Raises:
            DonorProfileUnavailable: If no profile could be resolved or created
            RoleNotAllowedError: If the account is not a donor
            UpstreamUnavailable: If the store fails or times out
        """
        ...

    async def reconcile(
        self,
        account: AuthenticatedUser,
        rejected_donor_profile_id: str,
    ) -> DonorProfile:
        """
        Re-resolve after a downstream rejection of a cached identity.

        Invalidates the cache entry and resolves from the store. Callers
        retry their operation at most once with the returned profile.
        """
        ...

    async def update_preferences(
        self,
        account: AuthenticatedUser,
        update: DonorPreferencesUpdate,
    ) -> DonorProfile:
        """Update donor preferences. Never touches donation stats."""
        ...

    def invalidate(self, account: AuthenticatedUser) -> None:
        """Drop the cached profile for this account session."""
        ...

    def handle_session_change(self, account_id: str) -> None:
        """Drop cached profiles for every session of an account."""
        ...
