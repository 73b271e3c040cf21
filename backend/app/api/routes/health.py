"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter

from backend.app.config import SERVICE_NAME, SERVICE_VERSION

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, Any]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"ok": True, "service": SERVICE_NAME, "version": SERVICE_VERSION}
