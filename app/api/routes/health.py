from __future__ import annotations

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check used by load balancers; never rate limited."""

    return {
        "status": "ok",
        "environment": settings.app_env,
        "rate_limit_enabled": settings.rate_limit.enabled,
    }
