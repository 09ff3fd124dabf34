"""Rotated-out refresh token fingerprints.

When a refresh token is rotated its fingerprint moves here. Presenting it
again is a theft signal: the owning session is revoked. Rows are purged once
the old token would have expired anyway.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, UTCDateTime


class SupersededRefreshToken(BaseModel):
    """Immutable record of a refresh fingerprint replaced by rotation.

    Fields:
        id, created_at: From BaseModel (created_at = rotation time)
        token_hash: Fingerprint of the rotated-out refresh token
        session_id: Session the token belonged to (cascade delete)
        expires_at: Original expiry of the rotated-out token
    """

    __tablename__ = "superseded_refresh_tokens"

    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Fingerprint of the rotated-out refresh token",
    )

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Session the token belonged to",
    )

    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        index=True,
        comment="Original expiry of the rotated-out token",
    )
