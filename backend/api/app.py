"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.exceptions import (
    AuthenticationError,
    BeyondMeasureError,
    ConflictError,
    NotFoundError,
    PermissionDenied,
    UpstreamUnavailable,
    ValidationError,
)
from modules.donors.exceptions import DonorProfileUnavailable
from modules.donors.routes import router as donors_router
from modules.profiles.routes import router as users_router
from modules.projects.exceptions import InvalidTransition
from modules.projects.routes import router as projects_router
from modules.wishlist.routes import router as wishlist_router
from .routes import health

logger = logging.getLogger(__name__)

# First match wins, so subclasses of the shared bases must not be listed
# after their base.
ERROR_STATUS_CODES: list[tuple[type[BeyondMeasureError], int]] = [
    (AuthenticationError, 401),
    (PermissionDenied, 403),
    (NotFoundError, 404),
    (InvalidTransition, 409),
    (DonorProfileUnavailable, 409),
    (ConflictError, 409),
    (ValidationError, 422),
    (UpstreamUnavailable, 503),
]


def status_code_for(exc: BeyondMeasureError) -> int:
    """HTTP status for a domain error; unmapped errors are server errors."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def handle_domain_error(request: Request, exc: BeyondMeasureError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Classroom project funding: review workflow, donors and wishlists",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(BeyondMeasureError, handle_domain_error)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(users_router, prefix="/api/users", tags=["users"])
    app.include_router(projects_router, prefix="/api/projects", tags=["projects"])
    app.include_router(donors_router, prefix="/api/donors", tags=["donors"])
    app.include_router(wishlist_router, prefix="/api/wishlist", tags=["wishlist"])

    return app


# Application instance for uvicorn
app = create_app()
