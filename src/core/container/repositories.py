"""Repository dependency factories.

Request-scoped repository instances. Each request gets fresh repository
instances sharing that request's database session and the app-wide store
policy.
"""

from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.container.infrastructure import get_db_session, get_store_policy

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import (
        SessionRepository,
        UserRepository,
    )


# ============================================================================
# Repository Factories (Request-Scoped)
# ============================================================================


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "UserRepository":
    """Get user repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).

    Returns:
        UserRepository instance.

    Usage:
        # Presentation Layer (FastAPI Depends)
        from fastapi import Depends
        from src.infrastructure.persistence.repositories import UserRepository

        @router.get("/users/{user_id}")
        async def get_user(
            user_repo: UserRepository = Depends(get_user_repository)
        ):
            user = await user_repo.find_by_id(user_id)
    """
    from src.infrastructure.persistence.repositories import UserRepository

    return UserRepository(session=session, policy=get_store_policy())


async def get_session_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "SessionRepository":
    """Get session repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import SessionRepository

    return SessionRepository(session=session, policy=get_store_policy())
