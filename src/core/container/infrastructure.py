"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Database (PostgreSQL via asyncpg)
- Store call policy (timeouts, read retries)
- Password hashing (bcrypt)
- Token issuing (PyJWT + HMAC fingerprints)
- Device enrichment (user-agents)
- Logging (structlog console adapter)
"""

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.store_guard import StorePolicy

if TYPE_CHECKING:
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
    from src.domain.protocols.token_issuer_protocol import TokenIssuerProtocol
    from src.infrastructure.enrichers import UserAgentDeviceEnricher


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Returns Database instance with connection pool.
    Use get_db_session() for per-request sessions.

    Usage:
        # Application Layer (direct use)
        db = get_database()

        # Presentation Layer - use get_db_session() instead
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_store_policy() -> StorePolicy:
    """Timeout and retry limits applied to every repository call."""
    return StorePolicy(
        timeout_seconds=settings.store_timeout_seconds,
        read_retries=settings.store_read_retries,
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Creates new session per request with automatic transaction management:
        - Commits on success
        - Rolls back on exception
        - Always closes session

    Yields:
        Database session for request duration.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


# ============================================================================
# Security Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped).

    Returns BcryptPasswordService with the configured cost factor
    (12 by default, ~250ms per hash).
    """
    from src.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=settings.bcrypt_rounds)


@lru_cache()
def get_token_issuer() -> "TokenIssuerProtocol":
    """Get session token issuer singleton (app-scoped).

    HS256 JWTs, 15-minute access and 7-day refresh lifetimes by default.
    """
    from src.infrastructure.security import SignedTokenIssuer

    return SignedTokenIssuer(
        settings.secret_key,
        access_ttl=settings.access_token_ttl,
        refresh_ttl=settings.refresh_token_ttl,
        algorithm=settings.algorithm,
    )


@lru_cache()
def get_device_enricher() -> "UserAgentDeviceEnricher":
    """Get User-Agent parser singleton (app-scoped)."""
    from src.infrastructure.enrichers import UserAgentDeviceEnricher

    return UserAgentDeviceEnricher()


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )
