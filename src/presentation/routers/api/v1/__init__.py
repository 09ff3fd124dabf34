"""API v1 routers.

RESTful resource-based endpoints.

Resources:
    /api/v1/sessions               - Session management (login/refresh/logout)

Admin Resources:
    /api/v1/admin/cleanup/...      - Cleanup statistics and sweeps
    /api/v1/admin/users/{id}/sessions - Per-user revocation
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.routers.api.v1.admin import admin_router
from src.presentation.routers.api.v1.sessions import router as sessions_router

# Create combined v1 router
v1_router = APIRouter(prefix=settings.api_v1_prefix)

v1_router.include_router(sessions_router)
v1_router.include_router(admin_router)

__all__ = [
    "v1_router",
    "sessions_router",
    "admin_router",
]
