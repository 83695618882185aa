"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import get_settings
from shared.database import execute_query, get_supabase_client
from shared.exceptions import UpstreamUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()

READINESS_TIMEOUT_SECONDS = 5.0


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Returns 503 when the data store cannot be reached.
    """
    try:
        client = get_supabase_client()
        await execute_query(
            lambda: client.table("users").select("id").limit(1).execute(),
            table="users",
            operation="readiness probe",
            timeout=READINESS_TIMEOUT_SECONDS,
        )
    except (RuntimeError, UpstreamUnavailable) as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="not_ready", database="unavailable").model_dump(),
        )

    return ReadinessResponse(status="ready", database="connected")
