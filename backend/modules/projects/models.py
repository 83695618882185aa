"""
Projects module data models.

These models define funding projects and the requests that drive them
through the review lifecycle.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


# Legacy status names still found in stored rows and older clients
STATUS_SYNONYMS: dict[str, str] = {
    "approved": "active",
    "rejected": "denied",
}


class ProjectStatus(str, Enum):
    """
    Project lifecycle status.

    ACTIVE is the canonical name for an approved, publicly listed project;
    "approved" is accepted as a synonym wherever a status is parsed.
    """

    DRAFT = "draft"                    # Editable by the owning teacher
    PENDING_REVIEW = "pending_review"  # Waiting for an admin decision
    NEEDS_REVISION = "needs_revision"  # Sent back with a review note
    ACTIVE = "active"                  # Approved and publicly listed
    DENIED = "denied"                  # Rejected with a review note
    FUNDED = "funded"                  # Funding goal reached
    COMPLETED = "completed"            # Delivered to the classroom

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            normalized = STATUS_SYNONYMS.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def stored_values(self) -> list[str]:
        """Every value a stored row in this state may carry."""
        return [self.value] + [
            legacy for legacy, canonical in STATUS_SYNONYMS.items() if canonical == self.value
        ]

    @property
    def is_public(self) -> bool:
        return self in PUBLIC_STATUSES


PUBLIC_STATUSES = frozenset({
    ProjectStatus.ACTIVE,
    ProjectStatus.FUNDED,
    ProjectStatus.COMPLETED,
})

# Statuses an admin review may decide on
REVIEW_DECISIONS = (
    ProjectStatus.ACTIVE,
    ProjectStatus.NEEDS_REVISION,
    ProjectStatus.DENIED,
)

# What admins see when they open the review queue without a filter
REVIEW_QUEUE_STATUSES = (ProjectStatus.DRAFT, ProjectStatus.PENDING_REVIEW)


class Project(BaseModel):
    """A funding request created by a teacher."""

    id: str = Field(..., description="Project ID (UUID)")
    teacher_id: str = Field(..., description="Owning teacher profile ID")
    title: str
    description: str = ""
    student_impact: str = ""
    funding_goal: Decimal = Field(default=Decimal(0))
    current_amount: Decimal = Field(default=Decimal(0))
    donor_count: int = Field(default=0)
    status: ProjectStatus = ProjectStatus.DRAFT
    main_image_url: Optional[str] = None
    review_notes: Optional[str] = Field(None, description="Latest admin review note")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    end_date: Optional[date] = None


class CreateProjectRequest(BaseModel):
    """Request to create a new draft project."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    student_impact: str = Field(..., min_length=1)
    funding_goal: Decimal = Field(..., gt=0, description="Amount to raise")
    end_date: Optional[date] = None
    main_image_url: Optional[str] = None
    category_ids: list[str] = Field(default_factory=list)

    @field_validator("title", "description", "student_impact")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class UpdateProjectRequest(BaseModel):
    """Edits to a draft project. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    student_impact: Optional[str] = Field(None, min_length=1)
    funding_goal: Optional[Decimal] = Field(None, gt=0, description="Amount to raise")
    end_date: Optional[date] = None
    main_image_url: Optional[str] = None

    @field_validator("title", "description", "student_impact")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ReviewProjectRequest(BaseModel):
    """Admin review decision for a project awaiting review."""

    status: str = Field(
        ...,
        description="Target status: active (or approved), needs_revision, or denied",
    )
    note: Optional[str] = Field(None, max_length=5000, description="Review note for the teacher")


class ReturnToDraftRequest(BaseModel):
    """Teacher request to reopen a project for editing."""

    reopen_denied: Optional[bool] = Field(
        None,
        description="Allow reopening a denied project; defaults to server policy",
    )


class ProjectListResponse(BaseModel):
    """List of projects."""

    projects: list[Project]
    total: int
