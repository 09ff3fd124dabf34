"""Reasons recorded when a session is deactivated."""

from enum import Enum


class RevocationReason(str, Enum):
    """Why a session stopped being active.

    Persisted on the session row for audit.
    """

    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    ADMIN = "admin"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_INACTIVE = "account_inactive"
