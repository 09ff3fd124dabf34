"""HTTP routers.

- system: non-versioned endpoints (root, health)
- api.v1: versioned API
"""

from src.presentation.routers.system import system_router

__all__ = ["system_router"]
