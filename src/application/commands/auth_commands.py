"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic
- Commands don't return values (handlers return Result types)
"""

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.enums import RevocationReason
from src.domain.value_objects import RequestContext


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Authenticate with email and password and open a session.

    Attributes:
        email: Login identifier (matched case-insensitively).
        password: Plain-text password. Never logged.
        context: Client IP, user agent and device details.

    Example:
        >>> command = LoginUser(
        ...     email="user@example.com",
        ...     password="SecurePass123!",
        ...     context=RequestContext(ip_address="203.0.113.7"),
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    password: str = field(repr=False)
    context: RequestContext = field(default_factory=RequestContext)


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """End the caller's current session.

    Attributes:
        user_id: Authenticated user.
        session_id: Session bound to the presented token.
    """

    user_id: UUID
    session_id: UUID


@dataclass(frozen=True, kw_only=True)
class LogoutAllSessions:
    """End every session of a user that exists right now.

    Used for "log out everywhere" and by administrators.

    Attributes:
        user_id: Whose sessions to revoke.
        reason: Recorded on each revoked row.
    """

    user_id: UUID
    reason: RevocationReason = RevocationReason.LOGOUT_ALL
