"""User roles for role-based access checks.

Stored data has historically carried either a single role string or a list of
roles. ``normalize_roles`` collapses both shapes into a frozenset at the
persistence boundary so authorization checks only ever see one form.

Usage:
    from src.domain.enums import UserRole, normalize_roles

    roles = normalize_roles(row.roles)
    if UserRole.ADMIN in roles:
        ...
"""

from collections.abc import Iterable
from enum import Enum


class UserRole(str, Enum):
    """User roles.

    String Enum:
        Inherits from str for easy serialization (JSON column, API payloads).
    """

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @classmethod
    def values(cls) -> list[str]:
        """Get all role values as strings."""
        return [role.value for role in cls]

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid role."""
        return value in cls.values()


def _coerce(value: str | UserRole) -> UserRole | None:
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(value.strip().lower())
    except ValueError:
        return None


def normalize_roles(
    raw: str | UserRole | Iterable[str | UserRole] | None,
) -> frozenset[UserRole]:
    """Normalize a scalar-or-collection role value into a set of roles.

    Unknown role names are dropped. An empty or missing value yields the
    default ``{UserRole.USER}``.

    Args:
        raw: A single role, an iterable of roles, or None.

    Returns:
        frozenset[UserRole]: Never empty.
    """
    if raw is None:
        candidates: Iterable[str | UserRole] = ()
    elif isinstance(raw, str):
        candidates = (raw,)
    else:
        candidates = raw

    roles = frozenset(
        role for role in (_coerce(value) for value in candidates) if role is not None
    )
    return roles or frozenset({UserRole.USER})
