"""End-to-end session and lockout flows against a real database.

Tests cover:
- Login -> validate -> refresh -> old refresh token rejected
- A replayed superseded refresh token is rejected; the rotated pair lives on
- Logout-all leaves sessions created afterwards valid
- Five failures lock for two hours; the lock decays after expiry
- A full cleanup sweep over real tables

Architecture:
- Real SessionManager, CredentialLockoutService and CleanupScheduler
- Real repositories on a per-test SQLite file
- FakeClock drives every timestamp
"""

from contextlib import asynccontextmanager
from datetime import timedelta

import pytest

from src.application.services import (
    CleanupScheduler,
    CleanupStores,
    CredentialLockoutService,
    SessionManager,
)
from src.domain.value_objects import RequestContext
from src.infrastructure.persistence.repositories import (
    SessionRepository,
    UserRepository,
)
from src.infrastructure.security import SignedTokenIssuer
from tests.conftest import BASE_TIME, TEST_SECRET, create_session, create_user

CONTEXT = RequestContext(
    ip_address="203.0.113.7",
    user_agent="Mozilla/5.0",
    device_info="Firefox on Linux",
    device_type="desktop",
)


class RecordingTransport:
    tokens = None

    def write_tokens(self, tokens):
        self.tokens = tokens


def make_manager(db_session, clock, logger) -> SessionManager:
    return SessionManager(
        session_repo=SessionRepository(db_session),
        user_repo=UserRepository(db_session),
        token_issuer=SignedTokenIssuer(TEST_SECRET, clock=clock),
        logger=logger,
        clock=clock,
    )


@pytest.mark.integration
class TestSessionLifecycle:
    async def test_login_validate_refresh(self, test_database, clock, mock_logger):
        user = create_user()

        async with test_database.get_session() as db_session:
            await UserRepository(db_session).add(user)
            manager = make_manager(db_session, clock, mock_logger)

            grant = await manager.create_session(user, CONTEXT)
            identity = await manager.validate(grant.tokens.access.value)

            clock.advance(minutes=20)
            expired_access = await manager.validate(grant.tokens.access.value)
            refreshed = await manager.refresh(grant.tokens.refresh.value)

        assert identity is not None
        assert identity.session_id == grant.identity.session_id
        assert expired_access is None
        assert refreshed is not None
        assert refreshed.session_id == grant.identity.session_id
        assert refreshed.session.refresh_token_hash != grant.tokens.refresh.fingerprint

    async def test_refresh_writes_new_pair_to_transport(
        self, test_database, clock, mock_logger
    ):
        user = create_user()

        transport = RecordingTransport()

        async with test_database.get_session() as db_session:
            await UserRepository(db_session).add(user)
            manager = make_manager(db_session, clock, mock_logger)
            grant = await manager.create_session(user, CONTEXT)

            await manager.refresh(grant.tokens.refresh.value, transport)
            assert transport.tokens is not None
            identity = await manager.validate(transport.tokens.access.value)
            stale = await manager.validate(grant.tokens.access.value)

        assert identity is not None
        assert stale is None

    async def test_replayed_refresh_token_is_rejected_and_session_survives(
        self, test_database, clock, mock_logger
    ):
        user = create_user()

        async with test_database.get_session() as db_session:
            await UserRepository(db_session).add(user)
            session_repo = SessionRepository(db_session)
            manager = make_manager(db_session, clock, mock_logger)
            grant = await manager.create_session(user, CONTEXT)
            first = await manager.refresh(grant.tokens.refresh.value)
            assert first is not None

            replay = await manager.refresh(grant.tokens.refresh.value)
            stored = await session_repo.find_by_id(grant.identity.session_id)

        assert replay is None
        assert stored is not None
        assert stored.is_active is True
        assert stored.revoked_reason is None
        warnings = [call.args[0] for call in mock_logger.warning.call_args_list]
        assert "Superseded refresh token presented; rejected" in warnings

    async def test_rotated_pair_outlives_replay_of_old_refresh_token(
        self, test_database, clock, mock_logger
    ):
        # A1/R1 -> refresh(R1) gives A2/R2 -> refresh(R1) rejected -> A2 valid
        user = create_user()
        transport = RecordingTransport()

        async with test_database.get_session() as db_session:
            await UserRepository(db_session).add(user)
            manager = make_manager(db_session, clock, mock_logger)
            grant = await manager.create_session(user, CONTEXT)
            r1 = grant.tokens.refresh.value

            rotated = await manager.refresh(r1, transport)
            assert rotated is not None
            assert transport.tokens is not None
            a2 = transport.tokens.access.value
            r2 = transport.tokens.refresh.value

            replay = await manager.refresh(r1)
            identity = await manager.validate(a2)

            clock.advance(seconds=1)
            next_rotation = await manager.refresh(r2)

        assert replay is None
        assert identity is not None
        assert identity.session_id == grant.identity.session_id
        assert next_rotation is not None
        assert next_rotation.session_id == grant.identity.session_id

    async def test_logout_all_spares_later_sessions(
        self, test_database, clock, mock_logger
    ):
        user = create_user()

        async with test_database.get_session() as db_session:
            await UserRepository(db_session).add(user)
            manager = make_manager(db_session, clock, mock_logger)
            first = await manager.create_session(user, CONTEXT)
            second = await manager.create_session(user, CONTEXT)

            clock.advance(seconds=1)
            revoked = await manager.destroy_all(user.id)
            clock.advance(seconds=1)
            later = await manager.create_session(user, CONTEXT)

            assert await manager.validate(first.tokens.access.value) is None
            assert await manager.validate(second.tokens.access.value) is None
            remaining = await manager.list_active(user.id)
            later_identity = await manager.validate(later.tokens.access.value)

        assert revoked == 2
        assert [s.session_id for s in remaining] == [later.identity.session_id]
        assert later_identity is not None

    async def test_logout_invalidates_on_next_request(
        self, test_database, clock, mock_logger
    ):
        user = create_user()

        async with test_database.get_session() as db_session:
            await UserRepository(db_session).add(user)
            manager = make_manager(db_session, clock, mock_logger)
            grant = await manager.create_session(user, CONTEXT)

            await manager.destroy(grant.identity.session_id)
            await manager.destroy(grant.identity.session_id)
            access = await manager.validate(grant.tokens.access.value)
            refresh = await manager.refresh(grant.tokens.refresh.value)

        assert access is None
        assert refresh is None


@pytest.mark.integration
class TestLockoutLifecycle:
    async def test_five_failures_lock_then_decay(
        self, test_database, clock, mock_logger
    ):
        user = create_user()

        async with test_database.get_session() as db_session:
            user_repo = UserRepository(db_session)
            await user_repo.add(user)
            lockout = CredentialLockoutService(user_repo, mock_logger, clock=clock)

            for _ in range(4):
                status = await lockout.record_failure(user.id)
                assert status.locked is False
            locking = await lockout.record_failure(user.id)

            clock.advance(hours=1, minutes=59, seconds=59)
            still_locked = await lockout.is_locked(user.id)

            clock.advance(seconds=1)
            unlocked = await lockout.is_locked(user.id)
            after_expiry = await lockout.record_failure(user.id)
            stored = await user_repo.find_by_id(user.id)

        assert locking.locked is True
        assert locking.locked_until == BASE_TIME + timedelta(hours=2)
        assert still_locked.locked is True
        assert still_locked.retry_after_seconds == 1
        assert unlocked.locked is False
        assert after_expiry.locked is False
        assert stored is not None
        assert stored.failed_login_attempts == 1
        assert stored.locked_until is None

    async def test_success_resets_counter(self, test_database, clock, mock_logger):
        user = create_user(failed_login_attempts=4)

        async with test_database.get_session() as db_session:
            user_repo = UserRepository(db_session)
            await user_repo.add(user)
            lockout = CredentialLockoutService(user_repo, mock_logger, clock=clock)

            await lockout.record_success(user.id)
            status = await lockout.record_failure(user.id)
            stored = await user_repo.find_by_id(user.id)

        assert status.locked is False
        assert stored is not None
        assert stored.failed_login_attempts == 1
        assert stored.last_login_at == BASE_TIME


@pytest.mark.integration
class TestCleanupSweep:
    async def test_sweep_over_real_tables(self, test_database, clock, mock_logger):
        user = create_user()
        locked = create_user(
            failed_login_attempts=5, locked_until=BASE_TIME - timedelta(days=2)
        )
        live = create_session(user_id=user.id)
        dead = create_session(user_id=user.id, now=BASE_TIME - timedelta(days=8))
        revoked = create_session(
            user_id=user.id, now=BASE_TIME - timedelta(days=2), is_active=False
        )

        async with test_database.get_session() as db_session:
            user_repo = UserRepository(db_session)
            session_repo = SessionRepository(db_session)
            for entity in (user, locked):
                await user_repo.add(entity)
            for session in (live, dead, revoked):
                await session_repo.add(session)

        @asynccontextmanager
        async def store_scope():
            async with test_database.get_session() as db_session:
                yield CleanupStores(
                    session_repo=SessionRepository(db_session),
                    user_repo=UserRepository(db_session),
                )

        scheduler = CleanupScheduler(
            store_scope=store_scope,
            logger=mock_logger,
            clock=clock,
            inactive_retention=timedelta(hours=24),
            stale_lock_retention=timedelta(hours=24),
        )

        report = await scheduler.run_cleanup()
        stats = await scheduler.cleanup_statistics()

        assert report.failed_tasks == ()
        assert report.expired_sessions == 1
        assert report.inactive_sessions == 1
        assert report.stale_locks == 1
        assert (stats.active, stats.total) == (1, 1)
