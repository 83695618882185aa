"""
Profile service implementation.

Resolves acting accounts against the store and handles sign-up
provisioning and teacher verification.
"""

import asyncio
import logging
from typing import Optional

from shared.config import Settings, get_settings
from shared.exceptions import (
    PreconditionFailedError,
    UniqueViolationError,
    UpstreamUnavailable,
)
from shared.models import AuthenticatedUser

from .interfaces import IProfileService, IProfileStore
from .models import (
    Actor,
    Profile,
    RegistrationRequest,
    Role,
    TeacherProfile,
)
from .exceptions import (
    MissingTeacherFieldsError,
    ProfileNotFoundError,
    RoleMismatchError,
    RoleNotAllowedError,
    TeacherProfileNotFoundError,
)

logger = logging.getLogger(__name__)


async def load_actor(store: IProfileStore, account: AuthenticatedUser) -> Actor:
    """
    Re-read the acting account's profile (and teacher profile) from the store.

    Raises:
        ProfileNotFoundError: If the account has no profile row
    """
    profile = await store.find_by_account(account.id)
    if profile is None:
        raise ProfileNotFoundError(account.id)

    teacher_profile = None
    if profile.role == Role.TEACHER:
        teacher_profile = await store.find_teacher_by_profile(profile.id)

    return Actor(account=account, profile=profile, teacher_profile=teacher_profile)


class ProfileService(IProfileService):
    """
    Profile service backed by the profile store.

    Registration is get-or-create at every step so that a retry after a
    reported sign-up timeout converges on the same rows.
    """

    def __init__(
        self,
        store: IProfileStore,
        settings: Optional[Settings] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()

    async def get_current_profile(self, account: AuthenticatedUser) -> Profile:
        profile = await self._store.find_by_account(account.id)
        if profile is None:
            raise ProfileNotFoundError(account.id)
        return profile

    async def register_account(
        self,
        account: AuthenticatedUser,
        request: RegistrationRequest,
    ) -> Profile:
        """Create the profile rows for a new account under the sign-up timeout."""
        missing = request.missing_teacher_fields()
        if missing:
            raise MissingTeacherFieldsError(missing)

        timeout = self._settings.signup_timeout_seconds
        try:
            return await asyncio.wait_for(self._register(account, request), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Sign-up provisioning for account {account.id} timed out after {timeout}s")
            raise UpstreamUnavailable(
                "Account setup is taking longer than expected. Please try again.",
                service="supabase",
                details={"operation": "register account", "timeout_seconds": timeout},
            )

    async def _register(
        self,
        account: AuthenticatedUser,
        request: RegistrationRequest,
    ) -> Profile:
        profile = await self._store.find_by_account(account.id)

        if profile is None:
            try:
                profile = await self._store.create_profile(account.id, request)
                logger.info(f"Created {request.role.value} profile {profile.id} for account {account.id}")
            except UniqueViolationError:
                # A previous attempt landed after its caller gave up
                profile = await self._store.find_by_account(account.id)
                if profile is None:
                    raise
        elif profile.role != request.role:
            raise RoleMismatchError(profile.role.value, request.role.value)

        if profile.role == Role.TEACHER:
            await self._ensure_teacher_profile(profile, request)

        return profile

    async def _ensure_teacher_profile(
        self,
        profile: Profile,
        request: RegistrationRequest,
    ) -> TeacherProfile:
        existing = await self._store.find_teacher_by_profile(profile.id)
        if existing is not None:
            return existing

        try:
            return await self._store.create_teacher_profile(profile.id, request)
        except UniqueViolationError:
            existing = await self._store.find_teacher_by_profile(profile.id)
            if existing is None:
                raise
            return existing

    async def activate_teacher(
        self,
        account: AuthenticatedUser,
        teacher_profile_id: str,
    ) -> TeacherProfile:
        actor = await load_actor(self._store, account)
        if not actor.is_admin:
            raise RoleNotAllowedError("verify teachers", actor.role.value, [Role.ADMIN.value])

        teacher = await self._store.get_teacher_profile(teacher_profile_id)
        if teacher is None:
            raise TeacherProfileNotFoundError(teacher_profile_id)
        if teacher.is_active:
            return teacher

        try:
            activated = await self._store.activate_teacher_profile(teacher_profile_id)
        except PreconditionFailedError:
            # Another admin got there first
            current = await self._store.get_teacher_profile(teacher_profile_id)
            if current is None:
                raise TeacherProfileNotFoundError(teacher_profile_id)
            return current

        logger.info(f"Teacher profile {teacher_profile_id} activated by {actor.profile.id}")
        return activated
