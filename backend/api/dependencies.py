"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Repositories for profiles, donors and projects share the service-role
client. Wishlist writes must be evaluated by row-level security, so the
wishlist coordinator is built per request on a client carrying the
caller's token.
"""

from typing import TYPE_CHECKING

from shared.models import AuthenticatedUser

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.donors.cache import DonorProfileCache
    from modules.donors.interfaces import IDonorProvisioningService
    from modules.profiles.interfaces import IProfileService
    from modules.profiles.repository import ProfileRepository
    from modules.projects.interfaces import IProjectLifecycleService
    from modules.projects.repository import ProjectRepository
    from modules.wishlist.interfaces import IWishlistCoordinator


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._profile_repository: "ProfileRepository | None" = None
        self._project_repository: "ProjectRepository | None" = None
        self._donor_cache: "DonorProfileCache | None" = None
        self._profile_service: "IProfileService | None" = None
        self._donor_service: "IDonorProvisioningService | None" = None
        self._project_service: "IProjectLifecycleService | None" = None

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService()
        return self._auth_service

    @property
    def profile_repository(self) -> "ProfileRepository":
        """Get the profile store client."""
        if self._profile_repository is None:
            from modules.profiles.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def project_repository(self) -> "ProjectRepository":
        """Get the project repository instance."""
        if self._project_repository is None:
            from modules.projects.repository import ProjectRepository
            from shared.database import get_supabase_client
            self._project_repository = ProjectRepository(get_supabase_client())
        return self._project_repository

    @property
    def donor_cache(self) -> "DonorProfileCache":
        """Get the session-scoped donor profile cache."""
        if self._donor_cache is None:
            from modules.donors.cache import DonorProfileCache
            from shared.config import get_settings
            self._donor_cache = DonorProfileCache(
                ttl_seconds=get_settings().donor_cache_ttl_seconds,
            )
        return self._donor_cache

    @property
    def profiles(self) -> "IProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            self._profile_service = ProfileService(self.profile_repository)
        return self._profile_service

    @property
    def donors(self) -> "IDonorProvisioningService":
        """Get the donor provisioning service instance."""
        if self._donor_service is None:
            from modules.donors.service import DonorProvisioningService
            self._donor_service = DonorProvisioningService(
                store=self.profile_repository,
                cache=self.donor_cache,
            )
        return self._donor_service

    @property
    def projects(self) -> "IProjectLifecycleService":
        """Get the project lifecycle service instance."""
        if self._project_service is None:
            from modules.projects.service import ProjectLifecycleService
            self._project_service = ProjectLifecycleService(
                store=self.project_repository,
                profiles=self.profile_repository,
            )
        return self._project_service

    def wishlist_for(self, account: AuthenticatedUser) -> "IWishlistCoordinator":
        """Build a wishlist coordinator acting with the account's own token."""
        from modules.wishlist.repository import WishlistRepository
        from modules.wishlist.service import WishlistCoordinator
        from shared.database import get_supabase_user_client

        store = WishlistRepository(get_supabase_user_client(account.access_token or ""))
        return WishlistCoordinator(store=store, donors=self.donors)

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._profile_repository = None
        self._project_repository = None
        self._donor_cache = None
        self._profile_service = None
        self._donor_service = None
        self._project_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() will create a fresh container with
    new service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_profile_service() -> "IProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profiles


def get_donor_service() -> "IDonorProvisioningService":
    """FastAPI dependency for donor provisioning service."""
    return get_container().donors


def get_project_service() -> "IProjectLifecycleService":
    """FastAPI dependency for project lifecycle service."""
    return get_container().projects
