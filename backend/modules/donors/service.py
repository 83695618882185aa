"""
Donor provisioning service implementation.

Guarantees that a donor account has exactly one donor profile and keeps the
per-session cache honest against the store.
"""

import logging
from typing import Optional

from shared.config import get_settings
from shared.exceptions import PreconditionFailedError, UniqueViolationError
from shared.models import AuthenticatedUser
from modules.profiles.exceptions import RoleNotAllowedError
from modules.profiles.interfaces import IProfileStore
from modules.profiles.models import DonorPreferencesUpdate, DonorProfile, Role

from .cache import DonorProfileCache
from .exceptions import DonorProfileUnavailable
from .interfaces import IDonorProvisioningService

logger = logging.getLogger(__name__)


class DonorProvisioningService(IDonorProvisioningService):
    """
    Get-or-create for donor profiles with cache reconciliation.

    The store's unique constraint on donor_profiles.user_id is the only
    coordination between concurrent callers; this service never locks.
    """

    def __init__(
        self,
        store: IProfileStore,
        cache: Optional[DonorProfileCache] = None,
    ):
        self._store = store
        self._cache = cache or DonorProfileCache(
            ttl_seconds=get_settings().donor_cache_ttl_seconds,
        )

    @property
    def cache(self) -> DonorProfileCache:
        return self._cache

    async def resolve_donor_profile(self, account: AuthenticatedUser) -> DonorProfile:
        cached = self._cache.get(account)
        if cached is not None:
            logger.debug(f"Donor cache hit for account {account.id}: {cached.id}")
            return cached

        logger.debug(f"Donor cache miss for account {account.id}")
        return await self._resolve_from_store(account)

    async def reconcile(
        self,
        account: AuthenticatedUser,
        rejected_donor_profile_id: str,
    ) -> DonorProfile:
        logger.warning(
            f"Donor profile {rejected_donor_profile_id} rejected for account {account.id}, "
            "re-resolving from store"
        )
        self._cache.invalidate(account)
        donor = await self._resolve_from_store(account)

        if donor.id == rejected_donor_profile_id:
            logger.warning(
                f"Store returned the rejected donor profile {donor.id} for account {account.id}"
            )
        return donor

    async def update_preferences(
        self,
        account: AuthenticatedUser,
        update: DonorPreferencesUpdate,
    ) -> DonorProfile:
        donor = await self.resolve_donor_profile(account)
        changes = update.model_dump(exclude_none=True)
        if not changes:
            return donor

        try:
            updated = await self._store.update_donor_preferences(donor.id, changes)
        except PreconditionFailedError:
            # The cached row is gone; one reconciliation, then give up
            donor = await self.reconcile(account, donor.id)
            updated = await self._store.update_donor_preferences(donor.id, changes)

        self._cache.put(account, updated)
        return updated

    def invalidate(self, account: AuthenticatedUser) -> None:
        self._cache.invalidate(account)

    def handle_session_change(self, account_id: str) -> None:
        dropped = self._cache.invalidate_account(account_id)
        if dropped:
            logger.debug(f"Dropped {dropped} cached donor profile(s) for account {account_id}")

    # -------------------------------------------------------------------------
    # Store resolution
    # -------------------------------------------------------------------------

    async def _resolve_from_store(self, account: AuthenticatedUser) -> DonorProfile:
        profile = await self._store.find_by_account(account.id)
        if profile is None:
            raise DonorProfileUnavailable(account.id, reason="profile_missing")
        if profile.role != Role.DONOR:
            raise RoleNotAllowedError("use donor features", profile.role.value, [Role.DONOR.value])

        donor = await self._store.find_donor_by_profile(profile.id)
        if donor is None:
            donor = await self._create(account, profile.id)

        self._cache.put(account, donor)
        return donor

    async def _create(self, account: AuthenticatedUser, profile_id: str) -> DonorProfile:
        try:
            donor = await self._store.create_donor_profile(profile_id)
        except UniqueViolationError:
            logger.info(f"Concurrent donor profile creation for profile {profile_id}, re-fetching")
            donor = await self._store.find_donor_by_profile(profile_id)
            if donor is None:
                raise DonorProfileUnavailable(account.id, reason="creation_conflict")
            return donor

        logger.info(f"Created donor profile {donor.id} for profile {profile_id}")
        return donor

