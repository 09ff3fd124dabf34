"""User domain entity (credential-relevant subset).

Pure business logic, no framework dependencies. Lockout rules live in
``src.domain.value_objects.credential_state``; the entity only exposes its
counters as a ``CredentialState``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.domain.enums import UserRole
from src.domain.value_objects.credential_state import CredentialState


@dataclass
class User:
    """User account as seen by the credential and session layer.

    Business Rules:
        - Deactivated accounts never authenticate, whatever their lock state
        - Roles are always a non-empty set (normalized at the store boundary)
        - password_hash is never logged or returned

    Attributes:
        id: Unique user identifier (immutable).
        email: Login identifier.
        password_hash: Bcrypt hash.
        roles: Normalized role set.
        is_active: Account active status.
        failed_login_attempts: Consecutive failed logins.
        locked_until: End of the current lock, if any.
        last_login_at: Last successful login.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: UUID
    email: str
    password_hash: str
    roles: frozenset[UserRole] = field(
        default_factory=lambda: frozenset({UserRole.USER})
    )
    is_active: bool = True
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def credential_state(self) -> CredentialState:
        """Lockout counters as an immutable value."""
        return CredentialState(
            failed_login_attempts=self.failed_login_attempts,
            locked_until=self.locked_until,
        )

    def has_any_role(self, required: frozenset[UserRole]) -> bool:
        """True when the user holds at least one of ``required``."""
        return not self.roles.isdisjoint(required)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r}, is_active={self.is_active})"
