"""
Profiles module exceptions.
"""

from shared.exceptions import NotFoundError, PermissionDenied, ValidationError


class ProfileNotFoundError(NotFoundError):
    """Raised when an auth account has no application profile yet."""

    def __init__(self, account_id: str):
        super().__init__(
            "No profile exists for this account. Complete sign-up first.",
            code="PROFILE_NOT_FOUND",
            details={"account_id": account_id},
        )


class TeacherProfileNotFoundError(NotFoundError):
    """Raised when a teacher profile cannot be found."""

    def __init__(self, teacher_profile_id: str):
        super().__init__(
            f"Teacher profile not found: {teacher_profile_id}",
            code="TEACHER_PROFILE_NOT_FOUND",
            details={"teacher_profile_id": teacher_profile_id},
        )


class RoleNotAllowedError(PermissionDenied):
    """Raised when the acting account's role may not perform an action."""

    def __init__(self, action: str, role: str, allowed: list[str]):
        super().__init__(
            f"Only {' or '.join(allowed)} accounts can {action}",
            code="ROLE_NOT_ALLOWED",
            details={"action": action, "role": role, "allowed": allowed},
        )


class RoleMismatchError(ValidationError):
    """Raised when re-registering an account under a different role."""

    def __init__(self, existing: str, requested: str):
        super().__init__(
            f"Account is already registered as {existing}; roles cannot be changed",
            code="ROLE_MISMATCH",
            details={"existing_role": existing, "requested_role": requested},
        )


class MissingTeacherFieldsError(ValidationError):
    """Raised when a teacher registration lacks school details."""

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Missing required teacher fields: {', '.join(fields)}",
            code="MISSING_TEACHER_FIELDS",
            details={"fields": fields},
        )
