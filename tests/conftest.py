"""Pytest configuration shared by all test layers.

This configuration ensures:
1. Required settings exist before ``src`` is imported (settings load eagerly)
2. Every test gets its own database file and its own clock
3. Domain objects are built through small helpers, not copy-pasted literals
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters!")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import UTC, datetime, timedelta  # noqa: E402
from unittest.mock import Mock  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from uuid_extensions import uuid7  # noqa: E402

from src.domain.entities import Session, User  # noqa: E402
from src.domain.enums import UserRole  # noqa: E402

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Controllable clock for services that take ``clock=``.

    Usage:
        clock = FakeClock()
        service = CredentialLockoutService(..., clock=clock)
        clock.advance(minutes=5)
    """

    def __init__(self, now: datetime = BASE_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


def create_user(
    user_id: UUID | None = None,
    email: str | None = None,
    password_hash: str = "$2b$04$invalidinvalidinvalidinvalidinvalidinvalidinvalidinva",
    roles: frozenset[UserRole] = frozenset({UserRole.USER}),
    is_active: bool = True,
    failed_login_attempts: int = 0,
    locked_until: datetime | None = None,
    created_at: datetime | None = BASE_TIME,
) -> User:
    """Build a User entity with sensible defaults."""
    user_id = user_id or uuid7()
    return User(
        id=user_id,
        email=email or f"user_{user_id.hex[:12]}@example.com",
        password_hash=password_hash,
        roles=roles,
        is_active=is_active,
        failed_login_attempts=failed_login_attempts,
        locked_until=locked_until,
        created_at=created_at,
        updated_at=created_at,
    )


def create_session(
    session_id: UUID | None = None,
    user_id: UUID | None = None,
    now: datetime = BASE_TIME,
    access_ttl: timedelta = timedelta(minutes=15),
    refresh_ttl: timedelta = timedelta(days=7),
    is_active: bool = True,
    access_token_hash: str | None = None,
    refresh_token_hash: str | None = None,
    last_activity_at: datetime | None = None,
) -> Session:
    """Build a Session entity created at ``now``."""
    session_id = session_id or uuid7()
    return Session(
        id=session_id,
        user_id=user_id or uuid7(),
        access_token_hash=access_token_hash or f"a{session_id.hex}".ljust(64, "0"),
        refresh_token_hash=refresh_token_hash or f"r{session_id.hex}".ljust(64, "0"),
        access_token_expires_at=now + access_ttl,
        refresh_token_expires_at=now + refresh_ttl,
        is_active=is_active,
        last_activity_at=last_activity_at or now,
        ip_address="192.168.1.1",
        user_agent="Mozilla/5.0",
        device_info="Chrome on Mac OS X",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Fresh controllable clock per test."""
    return FakeClock()


@pytest.fixture
def mock_logger():
    """Provide a mock logger for testing.

    ``bind`` returns the same mock, so assertions work whether or not the
    component under test binds extra context.

    Usage:
        def test_something(mock_logger):
            service = MyService(logger=mock_logger)
            service.do_something()
            mock_logger.info.assert_called_once()
    """
    logger = Mock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest_asyncio.fixture
async def test_database(tmp_path):
    """Provide a fresh database for integration tests.

    Each test gets its own SQLite file, so tests never share rows and
    several independent sessions can be opened against the same data.

    Usage:
        async def test_something(test_database):
            async with test_database.get_session() as session1:
                ...
            async with test_database.get_session() as session2:
                ...
    """
    from src.infrastructure.persistence.database import Database

    db = Database(database_url=f"sqlite+aiosqlite:///{tmp_path / 'keyhold.db'}")
    await db.create_all()
    yield db
    await db.close()
