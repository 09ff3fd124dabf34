"""Authentication service and handler dependency factories.

Request-scoped:
- CredentialLockoutService, SessionManager (bound to the request's session)
- LoginUserHandler, LogoutUserHandler

Application-scoped:
- CleanupScheduler (process-wide singleton, opens its own sessions)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Depends

from src.core.config import settings
from src.core.container.infrastructure import (
    get_database,
    get_logger,
    get_password_service,
    get_store_policy,
    get_token_issuer,
)
from src.core.container.repositories import (
    get_session_repository,
    get_user_repository,
)

if TYPE_CHECKING:
    from src.application.commands.handlers.login_user_handler import (
        LoginUserHandler,
    )
    from src.application.commands.handlers.logout_user_handler import (
        LogoutUserHandler,
    )
    from src.application.services import (
        CleanupScheduler,
        CleanupStores,
        CredentialLockoutService,
        SessionManager,
    )
    from src.infrastructure.persistence.repositories import (
        SessionRepository,
        UserRepository,
    )


# ============================================================================
# Service Factories (Request-Scoped)
# ============================================================================


async def get_lockout_service(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "CredentialLockoutService":
    """Get credential lockout service (request-scoped).

    Threshold and lock duration come from settings (5 attempts, 2 hours).
    """
    from src.application.services import CredentialLockoutService
    from src.domain.value_objects import LockoutPolicy

    return CredentialLockoutService(
        user_repo=user_repo,
        logger=get_logger(),
        policy=LockoutPolicy(
            threshold=settings.lock_threshold,
            duration=settings.lock_duration,
        ),
    )


async def get_session_manager(
    session_repo: "SessionRepository" = Depends(get_session_repository),
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "SessionManager":
    """Get session manager (request-scoped).

    Usage:
        @router.get("/sessions")
        async def list_sessions(
            manager: SessionManager = Depends(get_session_manager),
        ):
            return await manager.list_active(identity.user_id)
    """
    from src.application.services import SessionManager

    return SessionManager(
        session_repo=session_repo,
        user_repo=user_repo,
        token_issuer=get_token_issuer(),
        logger=get_logger(),
        activity_interval=timedelta(seconds=settings.activity_update_interval_seconds),
    )


# ============================================================================
# Handler Factories (Request-Scoped)
# ============================================================================


async def get_login_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    lockout_service: "CredentialLockoutService" = Depends(get_lockout_service),
    session_manager: "SessionManager" = Depends(get_session_manager),
) -> "LoginUserHandler":
    """Get LoginUser command handler (request-scoped).

    Creates new handler instance per request with all required dependencies:
    - UserRepository (request-scoped, uses session)
    - CredentialLockoutService (request-scoped)
    - SessionManager (request-scoped)
    - BcryptPasswordService (app-scoped singleton)
    """
    from src.application.commands.handlers.login_user_handler import (
        LoginUserHandler,
    )

    return LoginUserHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        lockout_service=lockout_service,
        session_manager=session_manager,
        logger=get_logger(),
        access_token_ttl_seconds=int(settings.access_token_ttl.total_seconds()),
    )


async def get_logout_handler(
    session_manager: "SessionManager" = Depends(get_session_manager),
) -> "LogoutUserHandler":
    """Get LogoutUser / LogoutAllSessions handler (request-scoped)."""
    from src.application.commands.handlers.logout_user_handler import (
        LogoutUserHandler,
    )

    return LogoutUserHandler(session_manager=session_manager)


# ============================================================================
# Cleanup Scheduler (Application-Scoped)
# ============================================================================


@asynccontextmanager
async def _cleanup_store_scope() -> AsyncIterator["CleanupStores"]:
    from src.application.services import CleanupStores
    from src.infrastructure.persistence.repositories import (
        SessionRepository,
        UserRepository,
    )

    policy = get_store_policy()
    async with get_database().get_session() as session:
        yield CleanupStores(
            session_repo=SessionRepository(session=session, policy=policy),
            user_repo=UserRepository(session=session, policy=policy),
        )


@lru_cache()
def get_cleanup_scheduler() -> "CleanupScheduler":
    """Get cleanup scheduler singleton (app-scoped).

    Started and stopped by the application lifespan. Each sweep opens its
    own database session, independent of any request.
    """
    from src.application.services import CleanupScheduler

    return CleanupScheduler(
        store_scope=_cleanup_store_scope,
        logger=get_logger(),
        inactive_retention=timedelta(hours=settings.inactive_session_retention_hours),
        stale_lock_retention=timedelta(hours=settings.stale_lock_retention_hours),
    )
