"""
Profile repository for database access.

Encapsulates all Supabase queries and data mapping for profile tables:
- users
- teacher_profiles
- donor_profiles
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Any

from shared.exceptions import PreconditionFailedError
from shared.repository import BaseRepository
from .models import (
    DonorProfile,
    Profile,
    RegistrationRequest,
    Role,
    TeacherAccountStatus,
    TeacherProfile,
    TEACHER_FIELDS,
)


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for profile data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying roles.
    """

    # -------------------------------------------------------------------------
    # Profile (users) operations
    # -------------------------------------------------------------------------

    async def find_by_account(self, account_id: str) -> Optional[Profile]:
        result = await self._run(
            lambda: self._db.table("users").select("*").eq("auth_id", account_id).execute(),
            table="users",
            operation="find profile by account",
        )
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    async def create_profile(self, account_id: str, request: RegistrationRequest) -> Profile:
        data = {
            "auth_id": account_id,
            "email": request.email,
            "first_name": request.first_name,
            "last_name": request.last_name,
            "role": request.role.value,
        }
        result = await self._run(
            lambda: self._db.table("users").insert(data).execute(),
            table="users",
            operation="create profile",
        )
        return self._map_to_profile(result.data[0])

    # -------------------------------------------------------------------------
    # Teacher profile operations
    # -------------------------------------------------------------------------

    async def find_teacher_by_profile(self, profile_id: str) -> Optional[TeacherProfile]:
        result = await self._run(
            lambda: self._db.table("teacher_profiles").select("*").eq("user_id", profile_id).execute(),
            table="teacher_profiles",
            operation="find teacher profile",
        )
        if not result.data:
            return None
        return self._map_to_teacher_profile(result.data[0])

    async def get_teacher_profile(self, teacher_profile_id: str) -> Optional[TeacherProfile]:
        result = await self._run(
            lambda: self._db.table("teacher_profiles").select("*").eq("id", teacher_profile_id).execute(),
            table="teacher_profiles",
            operation="get teacher profile",
        )
        if not result.data:
            return None
        return self._map_to_teacher_profile(result.data[0])

    async def create_teacher_profile(
        self,
        profile_id: str,
        request: RegistrationRequest,
    ) -> TeacherProfile:
        data: dict[str, Any] = {name: getattr(request, name) for name in TEACHER_FIELDS}
        data.update({
            "user_id": profile_id,
            "account_status": TeacherAccountStatus.PENDING.value,
            "employment_verified": False,
            "nonprofit_status_verified": False,
        })
        result = await self._run(
            lambda: self._db.table("teacher_profiles").insert(data).execute(),
            table="teacher_profiles",
            operation="create teacher profile",
        )
        return self._map_to_teacher_profile(result.data[0])

    async def activate_teacher_profile(self, teacher_profile_id: str) -> TeacherProfile:
        data = {
            "account_status": TeacherAccountStatus.ACTIVE.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        result = await self._run(
            lambda: self._db.table("teacher_profiles")
            .update(data)
            .eq("id", teacher_profile_id)
            .eq("account_status", TeacherAccountStatus.PENDING.value)
            .execute(),
            table="teacher_profiles",
            operation="activate teacher profile",
        )
        if not result.data:
            raise PreconditionFailedError(
                "teacher_profiles",
                teacher_profile_id,
                [TeacherAccountStatus.PENDING.value],
            )
        return self._map_to_teacher_profile(result.data[0])

    # -------------------------------------------------------------------------
    # Donor profile operations
    # -------------------------------------------------------------------------

    async def find_donor_by_profile(self, profile_id: str) -> Optional[DonorProfile]:
        result = await self._run(
            lambda: self._db.table("donor_profiles").select("*").eq("user_id", profile_id).execute(),
            table="donor_profiles",
            operation="find donor profile",
        )
        if not result.data:
            return None
        return self._map_to_donor_profile(result.data[0])

    async def create_donor_profile(
        self,
        profile_id: str,
        is_anonymous_by_default: bool = False,
    ) -> DonorProfile:
        data = {
            "user_id": profile_id,
            "donation_total": 0,
            "projects_supported": 0,
            "is_anonymous": is_anonymous_by_default,
            "receives_updates_email": True,
        }
        result = await self._run(
            lambda: self._db.table("donor_profiles").insert(data).execute(),
            table="donor_profiles",
            operation="create donor profile",
        )
        return self._map_to_donor_profile(result.data[0])

    async def update_donor_preferences(
        self,
        donor_profile_id: str,
        changes: dict,
    ) -> DonorProfile:
        data: dict[str, Any] = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if "is_anonymous_by_default" in changes:
            data["is_anonymous"] = changes["is_anonymous_by_default"]
        if "receives_updates_email" in changes:
            data["receives_updates_email"] = changes["receives_updates_email"]

        result = await self._run(
            lambda: self._db.table("donor_profiles").update(data).eq("id", donor_profile_id).execute(),
            table="donor_profiles",
            operation="update donor preferences",
        )
        if not result.data:
            raise PreconditionFailedError("donor_profiles", donor_profile_id, ["present"])
        return self._map_to_donor_profile(result.data[0])

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_profile(self, data: dict[str, Any]) -> Profile:
        """Map users row to Profile model."""
        return Profile(
            id=str(data["id"]),
            auth_id=str(data["auth_id"]),
            email=data.get("email") or "",
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            role=Role(str(data["role"]).lower()),
        )

    def _map_to_teacher_profile(self, data: dict[str, Any]) -> TeacherProfile:
        """Map teacher_profiles row to TeacherProfile model."""
        return TeacherProfile(
            id=str(data["id"]),
            profile_id=str(data["user_id"]),
            school_name=data.get("school_name") or "",
            school_address=data.get("school_address") or "",
            school_city=data.get("school_city") or "",
            school_state=data.get("school_state") or "",
            school_postal_code=data.get("school_postal_code") or "",
            position_title=data.get("position_title") or "",
            account_status=TeacherAccountStatus(
                data.get("account_status") or TeacherAccountStatus.PENDING.value
            ),
        )

    def _map_to_donor_profile(self, data: dict[str, Any]) -> DonorProfile:
        """Map donor_profiles row to DonorProfile model."""
        return DonorProfile(
            id=str(data["id"]),
            profile_id=str(data["user_id"]),
            donation_total=Decimal(str(data.get("donation_total") or 0)),
            projects_supported=data.get("projects_supported") or 0,
            is_anonymous_by_default=bool(data.get("is_anonymous", False)),
            receives_updates_email=bool(data.get("receives_updates_email", True)),
            created_at=data.get("created_at"),
        )
