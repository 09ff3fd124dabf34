"""Session database model.

Stores fingerprints of the current access and refresh tokens, never the
tokens themselves. Logout flips ``is_active``; rows are deleted only by the
cleanup sweep.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, UTCDateTime


class Session(BaseMutableModel):
    """Session model.

    Fields:
        id, created_at, updated_at: From BaseMutableModel
        user_id: Owning user (cascade delete)
        access_token_hash / refresh_token_hash: Current token fingerprints
        access_token_expires_at / refresh_token_expires_at: Independent expiries
        is_active: False after logout, revocation or reuse detection
        last_activity_at: Last validated request (throttled writes)
        ip_address / user_agent / device_info: Client context at login
        revoked_at / revoked_reason: Deactivation audit

    Indexes:
        - ix_sessions_access_token_hash / ix_sessions_refresh_token_hash: lookup
        - idx_sessions_user_active: (user_id, is_active, refresh_token_expires_at)
        - idx_sessions_cleanup: (is_active, refresh_token_expires_at)
    """

    __tablename__ = "sessions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who owns this session",
    )

    access_token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="HMAC-SHA256 fingerprint of the current access token",
    )

    refresh_token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="HMAC-SHA256 fingerprint of the current refresh token",
    )

    access_token_expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        comment="Access token expiry",
    )

    refresh_token_expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        index=True,
        comment="Refresh token expiry",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the session can still be used",
    )

    last_activity_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=None,
        comment="Last validated request (eventually consistent)",
    )

    ip_address: Mapped[str | None] = mapped_column(
        String(45),
        nullable=True,
        default=None,
        comment="Client IP address at session creation",
    )

    user_agent: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Full user agent string from HTTP header",
    )

    device_info: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="Parsed device info (browser, OS)",
    )

    revoked_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=None,
        comment="When the session was deactivated",
    )

    revoked_reason: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        default=None,
        comment="Why the session was deactivated",
    )

    __table_args__ = (
        Index(
            "idx_sessions_user_active",
            "user_id",
            "is_active",
            "refresh_token_expires_at",
        ),
        Index("idx_sessions_cleanup", "is_active", "refresh_token_expires_at"),
    )
