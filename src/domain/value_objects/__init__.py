"""Domain value objects (immutable, no identity)."""

from src.domain.value_objects.credential_state import (
    DEFAULT_POLICY,
    LOCK_DURATION,
    LOCK_THRESHOLD,
    CredentialState,
    LockoutPolicy,
    LockStatus,
    lock_status,
    register_failure,
    register_success,
)
from src.domain.value_objects.request_context import RequestContext

__all__ = [
    "DEFAULT_POLICY",
    "LOCK_DURATION",
    "LOCK_THRESHOLD",
    "CredentialState",
    "LockStatus",
    "LockoutPolicy",
    "RequestContext",
    "lock_status",
    "register_failure",
    "register_success",
]
