"""
Wishlist coordinator implementation.
"""

import logging

from shared.exceptions import RowLevelSecurityError, UniqueViolationError
from shared.models import AuthenticatedUser
from modules.donors.interfaces import IDonorProvisioningService
from modules.profiles.models import DonorProfile

from .exceptions import WishlistPermissionDenied
from .interfaces import IWishlistCoordinator, IWishlistStore
from .models import WishlistResponse, WishlistStatus, WishlistToggleResult

logger = logging.getLogger(__name__)


class WishlistCoordinator(IWishlistCoordinator):
    """
    Adds and removes wishlist entries for the acting donor.

    The store is user-scoped, so one coordinator serves one request. The
    donor provisioning service and its cache are shared across requests.
    """

    def __init__(self, store: IWishlistStore, donors: IDonorProvisioningService):
        self._store = store
        self._donors = donors

    async def toggle(self, account: AuthenticatedUser, project_id: str) -> WishlistToggleResult:
        donor = await self._donors.resolve_donor_profile(account)

        try:
            return await self._toggle_once(donor, project_id)
        except RowLevelSecurityError:
            logger.warning(
                f"Wishlist write for project {project_id} rejected for donor {donor.id}, "
                "reconciling donor profile"
            )

        donor = await self._donors.reconcile(account, donor.id)
        try:
            return await self._toggle_once(donor, project_id)
        except RowLevelSecurityError as e:
            logger.error(
                f"Wishlist write for project {project_id} rejected again for donor {donor.id} "
                f"(account {account.id})"
            )
            raise WishlistPermissionDenied(project_id, donor.id) from e

    async def is_in_wishlist(self, account: AuthenticatedUser, project_id: str) -> WishlistStatus:
        donor = await self._donors.resolve_donor_profile(account)
        present = await self._store.exists(donor.id, project_id)
        return WishlistStatus(in_wishlist=present, project_id=project_id)

    async def list_wishlist(self, account: AuthenticatedUser) -> WishlistResponse:
        donor = await self._donors.resolve_donor_profile(account)
        project_ids = await self._store.list_project_ids(donor.id)
        projects = await self._store.get_projects(project_ids)
        return WishlistResponse(projects=projects, total=len(projects))

    async def _toggle_once(self, donor: DonorProfile, project_id: str) -> WishlistToggleResult:
        if await self._store.exists(donor.id, project_id):
            await self._store.remove(donor.id, project_id)
            logger.info(f"Removed project {project_id} from wishlist of donor {donor.id}")
            in_wishlist = False
        else:
            try:
                await self._store.add(donor.id, project_id)
                logger.info(f"Added project {project_id} to wishlist of donor {donor.id}")
            except UniqueViolationError:
                logger.debug(f"Project {project_id} already on wishlist of donor {donor.id}")
            in_wishlist = True

        return WishlistToggleResult(
            in_wishlist=in_wishlist,
            donor_profile_id=donor.id,
            project_id=project_id,
        )
