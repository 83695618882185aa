"""
Wishlist module data models.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from modules.projects.models import ProjectStatus


class WishlistToggleResult(BaseModel):
    """Outcome of a wishlist toggle."""

    in_wishlist: bool = Field(..., description="Membership after the toggle")
    donor_profile_id: str = Field(..., description="Donor profile the toggle acted for")
    project_id: str


class WishlistStatus(BaseModel):
    """Whether a project is on the donor's wishlist."""

    in_wishlist: bool
    project_id: str


class WishlistProject(BaseModel):
    """Project summary shown on the wishlist page."""

    id: str
    title: str
    description: str = ""
    student_impact: str = ""
    funding_goal: Decimal = Field(default=Decimal(0))
    current_amount: Decimal = Field(default=Decimal(0))
    main_image_url: Optional[str] = None
    status: ProjectStatus


class WishlistResponse(BaseModel):
    """The donor's wishlist."""

    projects: list[WishlistProject]
    total: int
