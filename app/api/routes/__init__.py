from __future__ import annotations

from app.api.routes.admin import router as admin_router
from app.api.routes.health import router as health_router
from app.api.routes.reactions import router as reactions_router

__all__ = ["admin_router", "health_router", "reactions_router"]
