"""Session request/response schemas.

Pydantic models for session API request validation and response serialization.
Kept separate from domain entities - these are HTTP-layer concerns.

RESTful Endpoints:
    POST   /api/v1/sessions           - Create session (login)
    GET    /api/v1/sessions           - List own active sessions
    POST   /api/v1/sessions/refresh   - Rotate tokens
    DELETE /api/v1/sessions/current   - Delete current session (logout)
    DELETE /api/v1/sessions           - Revoke all own sessions
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.application.dtos import SessionSummary


# =============================================================================
# Login
# =============================================================================


class SessionCreateRequest(BaseModel):
    """Request schema for session creation (login).

    POST /api/v1/sessions
    Returns: 201 Created
    """

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["user@example.com"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password",
        examples=["SecurePass123!"],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "SecurePass123!",
            }
        }
    )


class SessionCreateResponse(BaseModel):
    """Response schema for session creation (201 Created).

    Tokens are also set as httponly cookies; the body copy serves
    header-based clients.
    """

    session_id: UUID = Field(..., description="New session identifier")
    access_token: str = Field(..., description="Short-lived access token")
    refresh_token: str = Field(..., description="Long-lived refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


# =============================================================================
# Refresh
# =============================================================================


class SessionRefreshRequest(BaseModel):
    """Request schema for token rotation.

    POST /api/v1/sessions/refresh
    Returns: 200 OK

    The body is optional; the refresh_token cookie is used when absent.
    """

    refresh_token: str | None = Field(
        default=None,
        max_length=4096,
        description="Refresh token (falls back to the refresh_token cookie)",
    )


# =============================================================================
# Session Response (shared)
# =============================================================================


class SessionResponse(BaseModel):
    """Response schema for a single active session (list item)."""

    id: UUID = Field(..., description="Session identifier")
    device_info: str | None = Field(
        None,
        description="Parsed device info (e.g., 'Chrome on Mac OS X')",
    )
    ip_address: str | None = Field(None, description="IP address at session creation")
    user_agent: str | None = Field(None, description="User agent at session creation")
    created_at: datetime | None = Field(None, description="When session was created")
    last_activity_at: datetime | None = Field(
        None,
        description="Last activity timestamp (updated at most once a minute)",
    )
    expires_at: datetime = Field(..., description="When the refresh token expires")
    is_current: bool = Field(
        default=False,
        description="Whether this is the session making the request",
    )

    @classmethod
    def from_summary(
        cls, summary: SessionSummary, *, current_session_id: UUID | None = None
    ) -> "SessionResponse":
        return cls(
            id=summary.session_id,
            device_info=summary.device_info,
            ip_address=summary.ip_address,
            user_agent=summary.user_agent,
            created_at=summary.created_at,
            last_activity_at=summary.last_activity_at,
            expires_at=summary.refresh_token_expires_at,
            is_current=summary.session_id == current_session_id,
        )


class SessionListResponse(BaseModel):
    """Response schema for session list.

    GET /api/v1/sessions
    Returns: 200 OK
    """

    sessions: list[SessionResponse] = Field(..., description="Active sessions")
    total_count: int = Field(..., description="Number of sessions returned")


# =============================================================================
# Revoke All Sessions
# =============================================================================


class SessionRevokeAllResponse(BaseModel):
    """Response schema for bulk session revocation.

    DELETE /api/v1/sessions
    Returns: 200 OK
    """

    revoked_count: int = Field(..., description="Number of sessions revoked")
    message: str = Field(
        default="Sessions revoked successfully",
        description="Success message",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "revoked_count": 3,
                "message": "Sessions revoked successfully",
            }
        }
    )
