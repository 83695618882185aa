"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents the acting account for a request.

    Populated from the identity provider's JWT claims and passed explicitly
    into every core operation. Carries identity only: the application role
    lives on the Profile row and is always re-read from the store.
    """

    id: str = Field(..., description="Account ID (auth UUID from Supabase)")
    email: str = Field(default="", description="Account email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    session_id: Optional[str] = Field(None, description="Auth session the token belongs to")
    access_token: Optional[str] = Field(
        None,
        description="Raw bearer token, used for store calls that must respect RLS",
        repr=False,
    )

    last_sign_in: Optional[datetime] = Field(None, description="Token issue time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }
