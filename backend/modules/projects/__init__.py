"""
Projects module.

Funding projects and their review lifecycle.

Public API:
- IProjectLifecycleService: Interface for project operations
- Project, ProjectStatus: Data models
- TRANSITIONS: The authoritative status transition table
"""

from .interfaces import IProjectLifecycleService, IProjectStore
from .models import (
    CreateProjectRequest,
    Project,
    ProjectListResponse,
    ProjectStatus,
    ReturnToDraftRequest,
    ReviewProjectRequest,
    UpdateProjectRequest,
    PUBLIC_STATUSES,
    REVIEW_DECISIONS,
    REVIEW_QUEUE_STATUSES,
)
from .transitions import TRANSITIONS, TransitionRule, find_rule, allowed_targets
from .exceptions import (
    InvalidReviewDecisionError,
    InvalidTransition,
    NotProjectOwnerError,
    ProjectNotEditableError,
    ProjectNotFoundError,
    ReviewNoteRequiredError,
    TeacherNotVerifiedError,
    TransitionNotPermittedError,
    UnknownStatusError,
)

__all__ = [
    # Interfaces
    "IProjectLifecycleService",
    "IProjectStore",
    # Models
    "CreateProjectRequest",
    "Project",
    "ProjectListResponse",
    "ProjectStatus",
    "ReturnToDraftRequest",
    "ReviewProjectRequest",
    "UpdateProjectRequest",
    "PUBLIC_STATUSES",
    "REVIEW_DECISIONS",
    "REVIEW_QUEUE_STATUSES",
    # Transitions
    "TRANSITIONS",
    "TransitionRule",
    "find_rule",
    "allowed_targets",
    # Exceptions
    "InvalidReviewDecisionError",
    "InvalidTransition",
    "NotProjectOwnerError",
    "ProjectNotEditableError",
    "ProjectNotFoundError",
    "ReviewNoteRequiredError",
    "TeacherNotVerifiedError",
    "TransitionNotPermittedError",
    "UnknownStatusError",
]
