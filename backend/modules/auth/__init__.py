"""
Authentication module.

Identity collaborator for the core: validates Supabase JWTs and yields the
acting account that every core operation receives explicitly.

Public API:
- IAuthService: Interface for auth operations
- JWTPayload: Decoded Supabase token claims
- Auth exceptions: InvalidTokenError, ExpiredTokenError, MissingTokenError
"""

from .interfaces import IAuthService
from .models import JWTPayload
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "JWTPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
]
