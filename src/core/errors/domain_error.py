"""Base domain error class for railway-oriented programming.

DomainError is the base class for errors that flow through the system as
data (inside ``Failure``), not as raised exceptions.

Architecture:
- Base class for handler errors and infrastructure errors alike
- Does NOT inherit from Exception (returned in Result, never raised)
- Frozen dataclass, so errors are safe to share and compare

Usage:
    from src.core.errors import DomainError
    from src.core.enums import ErrorCode

    @dataclass(frozen=True, slots=True, kw_only=True)
    class AccountLockedError(DomainError):
        locked_until: datetime
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
