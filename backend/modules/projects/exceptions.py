"""
Projects module exceptions.
"""

from typing import Optional

from shared.exceptions import (
    BeyondMeasureError,
    ConflictError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)

from .models import ProjectStatus, REVIEW_DECISIONS


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found (or not visible to the caller)."""

    def __init__(self, project_id: str):
        super().__init__(
            f"Project not found: {project_id}",
            code="PROJECT_NOT_FOUND",
            details={"project_id": project_id},
        )


class InvalidTransition(BeyondMeasureError):
    """
    Raised when a status change is not reachable from the current state.

    Also raised when another actor changed the status first. Callers should
    refresh the project before trying again, not retry blindly.
    """

    def __init__(
        self,
        project_id: str,
        current: ProjectStatus,
        target: ProjectStatus,
        reason: Optional[str] = None,
    ):
        super().__init__(
            reason or f"Cannot move a {current.value} project to {target.value}",
            code="INVALID_TRANSITION",
            details={
                "project_id": project_id,
                "current_status": current.value,
                "target_status": target.value,
            },
        )
        self.current = current
        self.target = target


class NotProjectOwnerError(PermissionDenied):
    """Raised when a teacher acts on a project they do not own."""

    def __init__(self, project_id: str, profile_id: str):
        super().__init__(
            "Only the teacher who owns this project can change it",
            code="NOT_PROJECT_OWNER",
            details={"project_id": project_id, "profile_id": profile_id},
        )


class TransitionNotPermittedError(PermissionDenied):
    """Raised when the actor's role may not make a status change."""

    def __init__(self, project_id: str, role: str, target: ProjectStatus):
        super().__init__(
            f"A {role} account cannot move this project to {target.value}",
            code="TRANSITION_NOT_PERMITTED",
            details={"project_id": project_id, "role": role, "target_status": target.value},
        )


class TeacherNotVerifiedError(PermissionDenied):
    """Raised when a teacher without an active teacher profile creates a project."""

    def __init__(self, profile_id: str, reason: str):
        super().__init__(
            reason,
            code="TEACHER_NOT_VERIFIED",
            details={"profile_id": profile_id},
        )


_NOTE_ACTIONS = {
    ProjectStatus.DENIED: "deny a project",
    ProjectStatus.NEEDS_REVISION: "request revisions",
}


class ReviewNoteRequiredError(ValidationError):
    """Raised when a review decision that needs feedback has no note."""

    def __init__(self, target: ProjectStatus):
        action = _NOTE_ACTIONS.get(target, f"move a project to {target.value}")
        super().__init__(
            f"A review note is required to {action}",
            code="REVIEW_NOTE_REQUIRED",
            details={"target_status": target.value},
        )


class UnknownStatusError(ValidationError):
    """Raised when a requested status does not exist."""

    def __init__(self, value: str):
        super().__init__(
            f"Unknown project status: {value}",
            code="UNKNOWN_STATUS",
            details={
                "status": value,
                "allowed": [status.value for status in ProjectStatus],
            },
        )


class InvalidReviewDecisionError(ValidationError):
    """Raised when a review names a status that is not a review decision."""

    def __init__(self, status: ProjectStatus):
        super().__init__(
            f"{status.value} is not a review decision",
            code="INVALID_REVIEW_DECISION",
            details={
                "status": status.value,
                "allowed": [decision.value for decision in REVIEW_DECISIONS],
            },
        )


class ProjectNotEditableError(ConflictError):
    """Raised when a project's content is edited outside of draft."""

    def __init__(self, project_id: str, status: ProjectStatus, reason: Optional[str] = None):
        super().__init__(
            reason or f"Projects in '{status.value}' status cannot be edited",
            code="PROJECT_NOT_EDITABLE",
            details={"project_id": project_id, "status": status.value},
        )
        self.status = status
