"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*)
- Authentication errors (INVALID_CREDENTIALS, SESSION_*, TOKEN_*)
- Policy rejections (ACCOUNT_LOCKED, ACCOUNT_INACTIVE)
- Store faults (STORE_UNAVAILABLE)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    INVALID_INPUT = "invalid_input"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"
    SESSION_NOT_FOUND = "session_not_found"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_INVALID = "token_invalid"
    SESSION_INVALID = "session_invalid"
    AUTHENTICATION_FAILED = "authentication_failed"

    # Policy rejections
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_INACTIVE = "account_inactive"
    PERMISSION_DENIED = "permission_denied"

    # Store faults
    STORE_UNAVAILABLE = "store_unavailable"
