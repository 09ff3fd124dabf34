"""Infrastructure-specific error codes.

Internal codes for tracking persistence failures. They travel inside
``DatabaseError.infrastructure_code`` while the domain-facing code stays
``ErrorCode.STORE_UNAVAILABLE``.
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    DATABASE_CONNECTION_FAILED = "database_connection_failed"
    DATABASE_TIMEOUT = "database_timeout"
    DATABASE_ERROR = "database_error"
