"""Admin API routers.

All endpoints require the admin role.
"""

from src.presentation.routers.api.v1.admin.cleanup import router as admin_router

__all__ = ["admin_router"]
