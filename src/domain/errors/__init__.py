"""Domain errors package.

Usage:
    from src.domain.errors import AccountLockedError, AuthenticationError
"""

from src.domain.errors.authentication_error import (
    AccountLockedError,
    AuthenticationError,
)

__all__ = [
    "AccountLockedError",
    "AuthenticationError",
]
