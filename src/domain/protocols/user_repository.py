"""UserRepository protocol (credential-relevant operations).

Port (interface) for hexagonal architecture. User CRUD beyond what login and
lockout need is handled elsewhere.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.user import User
from src.domain.value_objects.credential_state import CredentialState


class UserRepository(Protocol):
    """User repository protocol (port).

    This is a Protocol (not ABC) for structural typing.
    """

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive)."""
        ...

    async def add(self, user: User) -> None:
        """Insert a new user."""
        ...

    async def compare_and_set_credential_state(
        self,
        user_id: UUID,
        *,
        expected: CredentialState,
        new: CredentialState,
    ) -> bool:
        """Write ``new`` lockout counters only if the stored ones equal ``expected``.

        Returns:
            True if the row was updated. False means another attempt won the
            race (or the user vanished) and the caller should re-read.
        """
        ...

    async def record_successful_login(
        self,
        user_id: UUID,
        *,
        expected: CredentialState,
        now: datetime,
    ) -> bool:
        """Reset counters, clear any lock and stamp last_login_at.

        Conditional on the stored counters still equalling ``expected``, so a
        lock set by a concurrent failure is never silently wiped.
        """
        ...

    async def clear_stale_locks(self, *, expired_before: datetime) -> int:
        """Reset accounts whose lock ended before ``expired_before``."""
        ...
