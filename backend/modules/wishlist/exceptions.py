"""
Wishlist module exceptions.
"""

from shared.exceptions import PermissionDenied


class WishlistPermissionDenied(PermissionDenied):
    """
    Raised when the store still rejects a wishlist change after the donor
    identity has been reconciled once.
    """

    def __init__(self, project_id: str, donor_profile_id: str):
        super().__init__(
            "Your wishlist could not be updated because your donor account "
            "does not match your sign-in. Please sign out and back in.",
            code="WISHLIST_PERMISSION_DENIED",
            details={"project_id": project_id, "donor_profile_id": donor_profile_id},
        )
