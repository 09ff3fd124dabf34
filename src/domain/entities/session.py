"""Session domain entity.

Pure business logic, no framework dependencies.

A session is the durable record behind a pair of tokens. Only digests of the
tokens are kept. Logout marks the row inactive; rows are physically removed
by the cleanup sweep once they are dead.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class Session:
    """Authenticated session.

    Business Rules:
        - Access is valid while active and before access_token_expires_at
        - Refresh is allowed while active and before refresh_token_expires_at
        - A row is purgeable once its refresh token has expired, or once it is
          inactive with both tokens expired
        - Deactivation is immediate and idempotent

    Attributes:
        id: Session identifier (UUIDv7).
        user_id: Owning user (reference only).
        access_token_hash: Fingerprint of the current access token.
        refresh_token_hash: Fingerprint of the current refresh token.
        access_token_expires_at: Short expiry (minutes).
        refresh_token_expires_at: Long expiry (days).
        is_active: False after logout, revocation or reuse detection.
        last_activity_at: Last validated request (eventually consistent).
        ip_address: Client IP at creation.
        user_agent: Raw User-Agent at creation.
        device_info: Parsed device summary.
        revoked_at: When the session was deactivated.
        revoked_reason: Why it was deactivated.
        created_at: Creation time.
        updated_at: Last modification time.
    """

    id: UUID
    user_id: UUID
    access_token_hash: str
    refresh_token_hash: str
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime
    is_active: bool = True
    last_activity_at: datetime | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    device_info: str | None = None
    revoked_at: datetime | None = None
    revoked_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_access_valid(self, now: datetime) -> bool:
        return self.is_active and self.access_token_expires_at > now

    def can_refresh(self, now: datetime) -> bool:
        return self.is_active and self.refresh_token_expires_at > now

    def is_purgeable(self, now: datetime) -> bool:
        """True once no token of this session can ever be used again."""
        if self.refresh_token_expires_at <= now:
            return True
        return not self.is_active and self.access_token_expires_at <= now

    def needs_activity_touch(self, now: datetime, interval: timedelta) -> bool:
        """Whether last_activity_at is stale enough to be rewritten."""
        if self.last_activity_at is None:
            return True
        return now - self.last_activity_at >= interval
