"""
Donors module exceptions.
"""

from shared.exceptions import BeyondMeasureError


class DonorProfileUnavailable(BeyondMeasureError):
    """
    Raised when no donor profile could be resolved or created.

    This is user-actionable: the UI should prompt the donor to finish
    setting up their account rather than show a generic failure.
    """

    def __init__(self, account_id: str, reason: str):
        super().__init__(
            "Your donor profile could not be set up. Please complete your donor account setup.",
            code="DONOR_PROFILE_UNAVAILABLE",
            details={"account_id": account_id, "reason": reason},
        )
        self.reason = reason
