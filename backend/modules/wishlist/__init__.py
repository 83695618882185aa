"""
Wishlist module.

Lets a donor save projects for later. Every write is attributed to the
donor profile resolved for the signed-in account.
"""

from .interfaces import IWishlistCoordinator, IWishlistStore
from .models import (
    WishlistProject,
    WishlistResponse,
    WishlistStatus,
    WishlistToggleResult,
)
from .exceptions import WishlistPermissionDenied

__all__ = [
    # Interface
    "IWishlistCoordinator",
    "IWishlistStore",
    # Models
    "WishlistProject",
    "WishlistResponse",
    "WishlistStatus",
    "WishlistToggleResult",
    # Exceptions
    "WishlistPermissionDenied",
]
