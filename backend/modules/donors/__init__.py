"""
Donors module.

Donor profile provisioning (get-or-create) and the per-session cache that
fronts it.

Public API:
- IDonorProvisioningService: Interface for provisioning and reconciliation
- DonorProfileCache: Session cache of donor profiles
- DonorProfileUnavailable: Raised when no donor profile can be resolved
"""

from .interfaces import IDonorProvisioningService
from .cache import DonorProfileCache
from .exceptions import DonorProfileUnavailable

__all__ = [
    "IDonorProvisioningService",
    "DonorProfileCache",
    "DonorProfileUnavailable",
]
