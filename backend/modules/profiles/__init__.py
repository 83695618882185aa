"""
Profiles module.

Application-level user records and the Profile Store Client consumed by the
donor and project modules.

Public API:
- IProfileStore: Store operations for profile rows
- IProfileService: Account-level operations (registration, verification)
- Profile, TeacherProfile, DonorProfile, Actor: Data models
"""

from .interfaces import IProfileStore, IProfileService
from .models import (
    Actor,
    DonorPreferencesUpdate,
    DonorProfile,
    Profile,
    RegistrationRequest,
    Role,
    TeacherAccountStatus,
    TeacherProfile,
)
from .exceptions import (
    ProfileNotFoundError,
    TeacherProfileNotFoundError,
    RoleNotAllowedError,
    RoleMismatchError,
    MissingTeacherFieldsError,
)

__all__ = [
    # Interfaces
    "IProfileStore",
    "IProfileService",
    # Models
    "Actor",
    "DonorPreferencesUpdate",
    "DonorProfile",
    "Profile",
    "RegistrationRequest",
    "Role",
    "TeacherAccountStatus",
    "TeacherProfile",
    # Exceptions
    "ProfileNotFoundError",
    "TeacherProfileNotFoundError",
    "RoleNotAllowedError",
    "RoleMismatchError",
    "MissingTeacherFieldsError",
]
