"""
Health check endpoint.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from sitesentinel.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
    }
