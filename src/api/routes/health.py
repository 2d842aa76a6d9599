"""
Health check endpoints.

Provides endpoints for monitoring application health and status.
"""

from typing import Any, Dict

from fastapi import APIRouter, Request


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "suggestion-api",
    }


@router.get("/ready")
async def readiness_check(request: Request) -> Dict[str, Any]:
    """
    Kubernetes-style readiness check.

    Ready once a non-empty catalog is loaded.
    """
    catalog_size = len(request.app.state.catalog)
    if catalog_size == 0:
        return {"status": "not_ready", "reason": "catalog_empty"}
    return {"status": "ready", "catalog_size": catalog_size}


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """Kubernetes-style liveness check."""
    return {"status": "alive"}
