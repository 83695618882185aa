"""
Profiles module interfaces.

IProfileStore is the Profile Store Client: the leaf accessor over the
external data service that the donor and project modules consume.
IProfileService covers account-level operations exposed to the API.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    DonorProfile,
    Profile,
    RegistrationRequest,
    TeacherProfile,
)


@runtime_checkable
class IProfileStore(Protocol):
    """
    Store operations for user, teacher and donor profile rows.

    Every method is a suspension point and may raise UpstreamUnavailable.
    """

    async def find_by_account(self, account_id: str) -> Optional[Profile]:
        """Get the profile linked to an auth account, if any."""
        ...

    async def create_profile(self, account_id: str, request: RegistrationRequest) -> Profile:
        """
        Insert a profile for an auth account.

        Raises:
            UniqueViolationError: If the account already has a profile
        """
        ...

    async def find_teacher_by_profile(self, profile_id: str) -> Optional[TeacherProfile]:
        """Get the teacher profile owned by a profile, if any."""
        ...

    async def get_teacher_profile(self, teacher_profile_id: str) -> Optional[TeacherProfile]:
        """Get a teacher profile by its own ID."""
        ...

    async def create_teacher_profile(
        self,
        profile_id: str,
        request: RegistrationRequest,
    ) -> TeacherProfile:
        """
        Insert a pending teacher profile.

        Raises:
            UniqueViolationError: If the profile already has one
        """
        ...

    async def activate_teacher_profile(self, teacher_profile_id: str) -> TeacherProfile:
        """
        Move a teacher profile from pending to active.

        Raises:
            PreconditionFailedError: If it was not pending
        """
        ...

    async def find_donor_by_profile(self, profile_id: str) -> Optional[DonorProfile]:
        """Get the donor profile owned by a profile, if any."""
        ...

    async def create_donor_profile(
        self,
        profile_id: str,
        is_anonymous_by_default: bool = False,
    ) -> DonorProfile:
        """
        Insert a donor profile with zeroed stats.

        Raises:
            UniqueViolationError: If the profile already has one
        """
        ...

    async def update_donor_preferences(
        self,
        donor_profile_id: str,
        changes: dict,
    ) -> DonorProfile:
        """Update donor preference columns."""
        ...


@runtime_checkable
class IProfileService(Protocol):
    """Interface for account-level profile operations."""

    async def get_current_profile(self, account: AuthenticatedUser) -> Profile:
        """Get the acting account's profile."""
        ...

    async def register_account(
        self,
        account: AuthenticatedUser,
        request: RegistrationRequest,
    ) -> Profile:
        """
        Create the application profile for a new account. Idempotent.

        Raises:
            MissingTeacherFieldsError: If a teacher omits school details
            RoleMismatchError: If the account exists with another role
            UpstreamUnavailable: If the store fails or the sign-up timeout elapses
        """
        ...

    async def activate_teacher(
        self,
        account: AuthenticatedUser,
        teacher_profile_id: str,
    ) -> TeacherProfile:
        """
        Verify a teacher so they may create projects. Admin only.

        Raises:
            RoleNotAllowedError: If the caller is not an admin
            TeacherProfileNotFoundError: If the teacher profile is unknown
        """
        ...
