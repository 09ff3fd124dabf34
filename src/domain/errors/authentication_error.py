"""Authentication domain errors.

Architecture:
    - Domain layer errors (no infrastructure dependencies)
    - Used in Result types (railway-oriented programming)
    - Never raised as exceptions (return Failure(error) instead)

Messages are deliberately uniform. A caller learns "invalid credentials or
session" for every authentication failure except a locked account, which
discloses its lock end so legitimate users know when to retry.
"""

from dataclasses import dataclass
from datetime import datetime

from src.core.errors import DomainError


class AuthenticationError:
    """Authentication error message constants.

    These are NOT exceptions - they are values placed in Failure results and
    HTTP problem details.
    """

    INVALID_CREDENTIALS = "Invalid credentials or session"
    ACCOUNT_LOCKED = "Account locked due to too many failed login attempts"
    INSUFFICIENT_PERMISSIONS = "Insufficient permissions"


@dataclass(frozen=True, slots=True, kw_only=True)
class AccountLockedError(DomainError):
    """Login rejected because the account is locked.

    Attributes:
        locked_until: When the lock ends.
        retry_after_seconds: Whole seconds until the lock ends.
    """

    locked_until: datetime
    retry_after_seconds: int
