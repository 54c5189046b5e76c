"""Health check endpoints."""
from fastapi import APIRouter
from typing import Dict, Any
from src.mcp.tools import TOOLS_REGISTRY
from src.server.settings import settings

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, str]:
    """Basic health check endpoint.

    Returns:
        Simple status response
    """
    return {"status": "ok"}


@router.get("/readyz")
async def readiness_check() -> Dict[str, Any]:
    """Readiness check endpoint.

    Checks if required environment variables are set.

    Returns:
        Status response with readiness info
    """
    checks = {
        "github_token": bool(settings.GITHUB_TOKEN),
        "github_api_url": bool(settings.GITHUB_API_URL),
        "tools_registered": bool(TOOLS_REGISTRY),
    }

    ready = all(checks.values())

    return {
        "status": "ok" if ready else "not_ready",
        "checks": checks
    }
