"""Authentication DTOs (Data Transfer Objects).

Result dataclasses returned by the session manager and the auth handlers.
These carry data from the application layer back to the presentation layer.

DTOs:
    - Identity: Who a validated request belongs to
    - SessionGrant: New session plus its token pair (login result)
    - SessionSummary: Read-only projection of an active session
    - LoginResponse: What the login handler hands to the router
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.entities import Session, User
from src.domain.enums import UserRole
from src.domain.protocols import TokenPair


@dataclass(frozen=True, kw_only=True)
class Identity:
    """Resolved identity for one authenticated request.

    Attributes:
        user: Account the session belongs to.
        session: Session the presented token is bound to.
    """

    user: User
    session: Session

    @property
    def user_id(self) -> UUID:
        return self.user.id

    @property
    def session_id(self) -> UUID:
        return self.session.id

    @property
    def roles(self) -> frozenset[UserRole]:
        return self.user.roles


@dataclass(frozen=True, kw_only=True)
class SessionGrant:
    """Response from successful session creation.

    Attributes:
        identity: Identity of the new session.
        tokens: Freshly issued access and refresh tokens.
    """

    identity: Identity
    tokens: TokenPair


@dataclass(frozen=True, kw_only=True)
class SessionSummary:
    """Active session as shown to its owner.

    Contains no token material, not even fingerprints.
    """

    session_id: UUID
    created_at: datetime | None
    last_activity_at: datetime | None
    refresh_token_expires_at: datetime
    ip_address: str | None
    user_agent: str | None
    device_info: str | None

    @classmethod
    def from_session(cls, session: Session) -> "SessionSummary":
        return cls(
            session_id=session.id,
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
            refresh_token_expires_at=session.refresh_token_expires_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            device_info=session.device_info,
        )


@dataclass(frozen=True, kw_only=True)
class LoginResponse:
    """Response from successful login.

    Attributes:
        user_id: Authenticated user.
        session_id: Newly created session.
        tokens: Token pair to hand to the client.
        expires_in: Access token lifetime in seconds.
    """

    user_id: UUID
    session_id: UUID
    tokens: TokenPair
    token_type: str = "bearer"
    expires_in: int = 900  # 15 minutes in seconds
