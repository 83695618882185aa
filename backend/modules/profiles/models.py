"""
Profiles module data models.

Application-level account records: the role-carrying Profile and the
role-specific TeacherProfile / DonorProfile extensions.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from shared.models import AuthenticatedUser


class Role(str, Enum):
    """Application role. Fixed at sign-up; there is no migration path."""

    TEACHER = "teacher"
    DONOR = "donor"
    ADMIN = "admin"


class TeacherAccountStatus(str, Enum):
    """Verification state of a teacher account."""

    PENDING = "pending"  # Awaiting admin verification
    ACTIVE = "active"    # May create projects


class Profile(BaseModel):
    """The application user record linked 1:1 to an auth account."""

    id: str = Field(..., description="Profile ID (users.id)")
    auth_id: str = Field(..., description="Auth account ID")
    email: str = Field(default="", description="Email address")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    role: Role = Field(..., description="Application role")

    model_config = {"frozen": True}


class TeacherProfile(BaseModel):
    """School details and verification state for a teacher."""

    id: str
    profile_id: str
    school_name: str = ""
    school_address: str = ""
    school_city: str = ""
    school_state: str = ""
    school_postal_code: str = ""
    position_title: str = ""
    account_status: TeacherAccountStatus = TeacherAccountStatus.PENDING

    @property
    def is_active(self) -> bool:
        return self.account_status == TeacherAccountStatus.ACTIVE


class DonorProfile(BaseModel):
    """Donation stats and preferences for a donor. At most one per Profile."""

    id: str = Field(..., min_length=1, description="Donor profile ID")
    profile_id: str = Field(..., description="Owning profile ID (users.id)")
    donation_total: Decimal = Field(default=Decimal(0), description="Lifetime donations")
    projects_supported: int = Field(default=0, ge=0, description="Distinct projects funded")
    is_anonymous_by_default: bool = Field(default=False)
    receives_updates_email: bool = Field(default=True)
    created_at: Optional[datetime] = None


class Actor(BaseModel):
    """
    The acting account resolved against the store.

    Built fresh for every operation so that role and ownership checks
    never rely on what the client believes.
    """

    account: AuthenticatedUser
    profile: Profile
    teacher_profile: Optional[TeacherProfile] = None

    @property
    def role(self) -> Role:
        return self.profile.role

    @property
    def is_admin(self) -> bool:
        return self.profile.role == Role.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.profile.role == Role.TEACHER


TEACHER_FIELDS = (
    "school_name",
    "school_address",
    "school_city",
    "school_state",
    "school_postal_code",
    "position_title",
)


class RegistrationRequest(BaseModel):
    """Sign-up details submitted after the auth account is created."""

    email: str = Field(..., min_length=3)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: Role

    # Teacher-specific fields
    school_name: Optional[str] = None
    school_address: Optional[str] = None
    school_city: Optional[str] = None
    school_state: Optional[str] = None
    school_postal_code: Optional[str] = None
    position_title: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_role(cls, data):
        if isinstance(data, dict) and isinstance(data.get("role"), str):
            data = {**data, "role": data["role"].strip().lower()}
        return data

    def missing_teacher_fields(self) -> list[str]:
        """Names of teacher fields that are absent or blank."""
        if self.role != Role.TEACHER:
            return []
        return [name for name in TEACHER_FIELDS if not (getattr(self, name) or "").strip()]


class DonorPreferencesUpdate(BaseModel):
    """Donor-editable preferences. Stats are never writable here."""

    is_anonymous_by_default: Optional[bool] = None
    receives_updates_email: Optional[bool] = None
