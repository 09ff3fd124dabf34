"""Application services.

Services:
    - CredentialLockoutService: Lockout state machine against stored accounts
    - SessionManager: Session create, validate, refresh and revoke
    - CleanupScheduler: Periodic sweep of dead session and lockout state
"""

from src.application.services.cleanup_scheduler import (
    CleanupScheduler,
    CleanupStores,
)
from src.application.services.credential_lockout_service import (
    CredentialLockoutService,
)
from src.application.services.session_manager import SessionManager

__all__ = [
    "CleanupScheduler",
    "CleanupStores",
    "CredentialLockoutService",
    "SessionManager",
]
