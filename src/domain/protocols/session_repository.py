"""SessionRepository protocol for session persistence.

Port (interface) for hexagonal architecture. The SQLAlchemy adapter lives in
``src.infrastructure.persistence.repositories.session_repository``.

Every mutating method is a single conditional statement in the store so that
concurrent callers, possibly on different replicas, are serialized by the
database rather than by application locks. Lookups that find nothing return
None; connection failures and timeouts raise ``StoreUnavailableError``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.session import Session


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionStatistics:
    """Session counts for operational visibility.

    Attributes:
        active: Active sessions whose refresh token is unexpired.
        inactive: Sessions marked inactive.
        expired: Sessions whose refresh token has expired (any state).
        total: All rows.
    """

    active: int
    inactive: int
    expired: int
    total: int


class SessionRepository(Protocol):
    """Session repository protocol (port).

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.
    """

    async def add(self, session: Session) -> None:
        """Insert a new session row."""
        ...

    async def find_by_id(self, session_id: UUID) -> Session | None:
        """Find a session by ID, whatever its state."""
        ...

    async def find_by_access_fingerprint(self, fingerprint: str) -> Session | None:
        """Find the session whose current access token has this fingerprint."""
        ...

    async def find_by_refresh_fingerprint(self, fingerprint: str) -> Session | None:
        """Find the session whose current refresh token has this fingerprint."""
        ...

    async def find_superseded(self, fingerprint: str) -> UUID | None:
        """Return the session a rotated-out refresh fingerprint belonged to."""
        ...

    async def find_active_by_user(self, user_id: UUID, now: datetime) -> list[Session]:
        """Active, unexpired sessions of a user, newest first. Read-only."""
        ...

    async def rotate_tokens(
        self,
        session_id: UUID,
        *,
        expected_refresh_hash: str,
        superseded_expires_at: datetime,
        access_token_hash: str,
        refresh_token_hash: str,
        access_token_expires_at: datetime,
        refresh_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        """Swap token material if the stored refresh fingerprint still matches.

        Compare-and-swap on ``refresh_token_hash``: of any number of
        concurrent calls with the same expected hash, exactly one returns
        True. The replaced fingerprint is remembered, with its original
        expiry ``superseded_expires_at``, for reuse detection.

        Returns:
            True if this call performed the rotation.
        """
        ...

    async def touch_activity(
        self, session_id: UUID, *, now: datetime, stale_before: datetime
    ) -> bool:
        """Set last_activity_at = now if it is older than ``stale_before``."""
        ...

    async def deactivate(self, session_id: UUID, *, reason: str, now: datetime) -> bool:
        """Mark one session inactive.

        Returns:
            True if the session was active before this call.
        """
        ...

    async def deactivate_all_for_user(
        self, user_id: UUID, *, reason: str, now: datetime
    ) -> int:
        """Mark every active session created at or before ``now`` inactive."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete rows whose refresh token expired, or inactive rows with both tokens expired."""
        ...

    async def delete_inactive(self, *, updated_before: datetime | None = None) -> int:
        """Delete inactive rows (all of them when ``updated_before`` is None)."""
        ...

    async def delete_superseded(self, now: datetime) -> int:
        """Forget rotated-out fingerprints whose token has expired anyway."""
        ...

    async def statistics(self, now: datetime) -> SessionStatistics:
        """Count sessions by state."""
        ...
