"""Request/response schemas for API endpoints.

All Pydantic models for HTTP request validation and response serialization.
Schemas are kept separate from domain entities (HTTP-layer concerns only).

Usage:
    from src.schemas import SessionCreateRequest, SessionListResponse
"""

from src.schemas.cleanup_schemas import (
    CleanupForceResponse,
    CleanupRunResponse,
    CleanupStatisticsResponse,
)
from src.schemas.session_schemas import (
    SessionCreateRequest,
    SessionCreateResponse,
    SessionListResponse,
    SessionRefreshRequest,
    SessionResponse,
    SessionRevokeAllResponse,
)

__all__ = [
    # Sessions
    "SessionCreateRequest",
    "SessionCreateResponse",
    "SessionListResponse",
    "SessionRefreshRequest",
    "SessionResponse",
    "SessionRevokeAllResponse",
    # Admin cleanup
    "CleanupForceResponse",
    "CleanupRunResponse",
    "CleanupStatisticsResponse",
]
