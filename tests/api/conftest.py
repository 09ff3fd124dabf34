"""Fixtures for HTTP-level tests.

The application is driven through FastAPI's TestClient with its container
dependencies overridden. The lifespan is not entered, so no scheduler or
database starts.
"""

from collections.abc import Iterator
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.application.dtos import Identity
from src.application.services import CleanupScheduler, SessionManager
from src.core.container import (
    get_cleanup_scheduler,
    get_database,
    get_login_handler,
    get_logout_handler,
    get_session_manager,
)
from src.domain.enums import TokenKind, UserRole
from src.domain.protocols import IssuedToken, TokenPair
from src.main import app
from tests.conftest import BASE_TIME, create_session, create_user

VALID_ACCESS_TOKEN = "valid-access-token"
ADMIN_ACCESS_TOKEN = "admin-access-token"


def make_identity(roles: frozenset[UserRole] = frozenset({UserRole.USER})) -> Identity:
    user = create_user(roles=roles)
    return Identity(user=user, session=create_session(user_id=user.id))


def make_token_pair(tag: str = "new") -> TokenPair:
    return TokenPair(
        access=IssuedToken(
            kind=TokenKind.ACCESS,
            value=f"{tag}-access",
            fingerprint="a" * 64,
            expires_at=BASE_TIME + timedelta(minutes=15),
        ),
        refresh=IssuedToken(
            kind=TokenKind.REFRESH,
            value=f"{tag}-refresh",
            fingerprint="r" * 64,
            expires_at=BASE_TIME + timedelta(days=7),
        ),
    )


@pytest.fixture
def user_identity() -> Identity:
    return make_identity()


@pytest.fixture
def admin_identity() -> Identity:
    return make_identity(frozenset({UserRole.ADMIN, UserRole.USER}))


@pytest.fixture
def session_manager(user_identity, admin_identity):
    """SessionManager mock that knows two access tokens."""
    manager = AsyncMock(spec=SessionManager)
    known = {
        VALID_ACCESS_TOKEN: user_identity,
        ADMIN_ACCESS_TOKEN: admin_identity,
    }

    async def validate(token: str) -> Identity | None:
        return known.get(token)

    manager.validate.side_effect = validate
    manager.refresh.return_value = None
    manager.list_active.return_value = []
    return manager


@pytest.fixture
def login_handler():
    return AsyncMock()


@pytest.fixture
def logout_handler():
    return AsyncMock()


@pytest.fixture
def scheduler():
    return AsyncMock(spec=CleanupScheduler)


@pytest.fixture
def database():
    db = AsyncMock()
    db.check_connection.return_value = True
    return db


@pytest.fixture
def client(
    session_manager, login_handler, logout_handler, scheduler, database
) -> Iterator[TestClient]:
    """TestClient with every container dependency replaced by a mock."""
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_login_handler] = lambda: login_handler
    app.dependency_overrides[get_logout_handler] = lambda: logout_handler
    app.dependency_overrides[get_cleanup_scheduler] = lambda: scheduler
    app.dependency_overrides[get_database] = lambda: database

    yield TestClient(app)

    app.dependency_overrides.clear()


def cleared_cookies(response) -> set[str]:
    """Names of cookies the response deletes (Max-Age=0)."""
    return {
        header.split("=")[0]
        for header in response.headers.get_list("set-cookie")
        if "Max-Age=0" in header
    }


def auth_header(token: str = VALID_ACCESS_TOKEN) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
