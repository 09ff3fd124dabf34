"""Unit tests for SessionManager.

Tests cover:
- Session creation (independent sessions, fingerprints stored, not tokens)
- Access validation (expiry, revocation, claim/row mismatch, inactive user)
- Throttled, best-effort activity updates
- Refresh rotation, lost races and superseded-token reuse
- Revocation of one or all sessions
- Listing never touches activity

Architecture:
- Real SignedTokenIssuer (pure CPU) with a controllable clock
- Mocked repository protocols
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from src.application.services import SessionManager
from src.core.enums import ErrorCode
from src.core.errors import DomainError, StoreUnavailableError
from src.domain.enums import RevocationReason
from src.domain.value_objects import RequestContext
from src.infrastructure.security import SignedTokenIssuer
from tests.conftest import TEST_SECRET, create_user

CONTEXT = RequestContext(
    ip_address="203.0.113.7",
    user_agent="Mozilla/5.0",
    device_info="Chrome on Mac OS X",
    device_type="desktop",
)


@pytest.fixture
def issuer(clock):
    return SignedTokenIssuer(TEST_SECRET, clock=clock)


@pytest.fixture
def session_repo():
    repo = AsyncMock()
    repo.rotate_tokens.return_value = True
    repo.deactivate.return_value = True
    repo.touch_activity.return_value = True
    return repo


@pytest.fixture
def user():
    return create_user()


@pytest.fixture
def user_repo(user):
    repo = AsyncMock()
    repo.find_by_id.return_value = user
    return repo


@pytest.fixture
def manager(session_repo, user_repo, issuer, mock_logger, clock):
    return SessionManager(
        session_repo=session_repo,
        user_repo=user_repo,
        token_issuer=issuer,
        logger=mock_logger,
        clock=clock,
        activity_interval=timedelta(seconds=60),
    )


async def _login(manager, session_repo, user):
    """Create a session and make the repository return it on lookup."""
    grant = await manager.create_session(user, CONTEXT)
    stored = session_repo.add.call_args.args[0]
    session_repo.find_by_access_fingerprint.return_value = stored
    session_repo.find_by_refresh_fingerprint.return_value = stored
    return grant, stored


@pytest.mark.unit
class TestCreateSession:
    async def test_create_session_persists_fingerprints(
        self, manager, session_repo, user, clock
    ):
        grant = await manager.create_session(user, CONTEXT)

        stored = session_repo.add.call_args.args[0]
        assert stored.user_id == user.id
        assert stored.is_active is True
        assert stored.access_token_hash == grant.tokens.access.fingerprint
        assert stored.refresh_token_hash == grant.tokens.refresh.fingerprint
        assert grant.tokens.access.value not in (
            stored.access_token_hash,
            stored.refresh_token_hash,
        )
        assert stored.access_token_expires_at == clock.now + timedelta(minutes=15)
        assert stored.refresh_token_expires_at == clock.now + timedelta(days=7)
        assert stored.ip_address == "203.0.113.7"
        assert stored.device_info == "Chrome on Mac OS X"
        assert stored.last_activity_at == clock.now
        assert grant.identity.session_id == stored.id

    async def test_each_login_creates_a_new_session(self, manager, session_repo, user):
        first = await manager.create_session(user, CONTEXT)
        second = await manager.create_session(user, CONTEXT)

        assert first.identity.session_id != second.identity.session_id
        assert session_repo.add.await_count == 2


@pytest.mark.unit
class TestValidate:
    async def test_valid_access_token(self, manager, session_repo, user):
        grant, stored = await _login(manager, session_repo, user)

        identity = await manager.validate(grant.tokens.access.value)

        assert identity is not None
        assert identity.user_id == user.id
        assert identity.session_id == stored.id

    async def test_refresh_token_not_accepted_as_access(
        self, manager, session_repo, user
    ):
        grant, _ = await _login(manager, session_repo, user)

        assert await manager.validate(grant.tokens.refresh.value) is None

    async def test_expired_access_token(self, manager, session_repo, user, clock):
        grant, _ = await _login(manager, session_repo, user)

        clock.advance(minutes=15)

        assert await manager.validate(grant.tokens.access.value) is None

    async def test_revoked_session(self, manager, session_repo, user):
        grant, stored = await _login(manager, session_repo, user)
        stored.is_active = False

        assert await manager.validate(grant.tokens.access.value) is None

    async def test_unknown_fingerprint(self, manager, session_repo, user):
        grant, _ = await _login(manager, session_repo, user)
        session_repo.find_by_access_fingerprint.return_value = None

        assert await manager.validate(grant.tokens.access.value) is None

    async def test_claims_must_match_row(self, manager, session_repo, user):
        grant, stored = await _login(manager, session_repo, user)
        stored.id = uuid7()

        assert await manager.validate(grant.tokens.access.value) is None

    async def test_inactive_user(self, manager, session_repo, user):
        grant, _ = await _login(manager, session_repo, user)
        user.is_active = False

        assert await manager.validate(grant.tokens.access.value) is None

    async def test_garbage_token_never_hits_store(self, manager, session_repo):
        assert await manager.validate("garbage") is None
        session_repo.find_by_access_fingerprint.assert_not_called()

    async def test_store_fault_propagates(self, manager, session_repo, user):
        grant, _ = await _login(manager, session_repo, user)
        session_repo.find_by_access_fingerprint.side_effect = StoreUnavailableError(
            DomainError(code=ErrorCode.STORE_UNAVAILABLE, message="down"),
            operation="sessions.find_by_access_fingerprint",
        )

        with pytest.raises(StoreUnavailableError):
            await manager.validate(grant.tokens.access.value)


@pytest.mark.unit
class TestActivityTouch:
    async def test_fresh_activity_is_not_rewritten(self, manager, session_repo, user):
        grant, _ = await _login(manager, session_repo, user)

        await manager.validate(grant.tokens.access.value)

        session_repo.touch_activity.assert_not_called()

    async def test_stale_activity_is_touched(self, manager, session_repo, user, clock):
        grant, _ = await _login(manager, session_repo, user)
        clock.advance(seconds=90)

        await manager.validate(grant.tokens.access.value)

        session_repo.touch_activity.assert_awaited_once()
        kwargs = session_repo.touch_activity.call_args.kwargs
        assert kwargs["now"] == clock.now
        assert kwargs["stale_before"] == clock.now - timedelta(seconds=60)

    async def test_touch_failure_does_not_fail_validation(
        self, manager, session_repo, user, clock, mock_logger
    ):
        grant, _ = await _login(manager, session_repo, user)
        clock.advance(seconds=90)
        session_repo.touch_activity.side_effect = StoreUnavailableError(
            DomainError(code=ErrorCode.STORE_UNAVAILABLE, message="timeout"),
            operation="sessions.touch_activity",
        )

        identity = await manager.validate(grant.tokens.access.value)

        assert identity is not None
        mock_logger.warning.assert_called_once()


@pytest.mark.unit
class TestRefresh:
    async def test_rotation_issues_new_pair(self, manager, session_repo, user, clock):
        grant, stored = await _login(manager, session_repo, user)
        old_refresh_hash = stored.refresh_token_hash
        transport = Mock()
        clock.advance(minutes=20)

        identity = await manager.refresh(grant.tokens.refresh.value, transport)

        assert identity is not None
        assert identity.session_id == stored.id
        new_pair = transport.write_tokens.call_args.args[0]
        assert new_pair.refresh.value != grant.tokens.refresh.value
        kwargs = session_repo.rotate_tokens.call_args.kwargs
        assert kwargs["expected_refresh_hash"] == old_refresh_hash
        assert kwargs["refresh_token_hash"] == new_pair.refresh.fingerprint
        assert kwargs["superseded_expires_at"] == grant.tokens.refresh.expires_at
        assert kwargs["refresh_token_expires_at"] == clock.now + timedelta(days=7)

    async def test_access_token_not_accepted_as_refresh(
        self, manager, session_repo, user
    ):
        grant, _ = await _login(manager, session_repo, user)

        assert await manager.refresh(grant.tokens.access.value) is None
        session_repo.rotate_tokens.assert_not_called()

    async def test_lost_race_returns_none_and_writes_nothing(
        self, manager, session_repo, user
    ):
        grant, _ = await _login(manager, session_repo, user)
        session_repo.rotate_tokens.return_value = False
        transport = Mock()

        assert await manager.refresh(grant.tokens.refresh.value, transport) is None
        transport.write_tokens.assert_not_called()
        session_repo.deactivate.assert_not_called()

    async def test_superseded_token_is_rejected_without_revoking(
        self, manager, session_repo, user, mock_logger
    ):
        grant, stored = await _login(manager, session_repo, user)
        session_repo.find_by_refresh_fingerprint.return_value = None
        session_repo.find_superseded.return_value = stored.id
        transport = Mock()

        assert await manager.refresh(grant.tokens.refresh.value, transport) is None

        session_repo.deactivate.assert_not_called()
        session_repo.rotate_tokens.assert_not_called()
        transport.write_tokens.assert_not_called()
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["session_id"] == str(stored.id)

    async def test_unknown_refresh_token_revokes_nothing(
        self, manager, session_repo, user
    ):
        grant, _ = await _login(manager, session_repo, user)
        session_repo.find_by_refresh_fingerprint.return_value = None
        session_repo.find_superseded.return_value = None

        assert await manager.refresh(grant.tokens.refresh.value) is None
        session_repo.deactivate.assert_not_called()

    async def test_inactive_account_revokes_on_refresh(
        self, manager, session_repo, user, clock
    ):
        grant, stored = await _login(manager, session_repo, user)
        user.is_active = False

        assert await manager.refresh(grant.tokens.refresh.value) is None
        session_repo.deactivate.assert_awaited_once_with(
            stored.id,
            reason=RevocationReason.ACCOUNT_INACTIVE.value,
            now=clock.now,
        )
        session_repo.rotate_tokens.assert_not_called()

    async def test_revoked_session_cannot_refresh(self, manager, session_repo, user):
        grant, stored = await _login(manager, session_repo, user)
        stored.is_active = False

        assert await manager.refresh(grant.tokens.refresh.value) is None
        session_repo.rotate_tokens.assert_not_called()


@pytest.mark.unit
class TestRevocation:
    async def test_destroy_deactivates_with_reason(
        self, manager, session_repo, clock, mock_logger
    ):
        session_id = uuid7()

        await manager.destroy(session_id)

        session_repo.deactivate.assert_awaited_once_with(
            session_id, reason=RevocationReason.LOGOUT.value, now=clock.now
        )
        mock_logger.info.assert_called_once()

    async def test_destroy_is_idempotent(self, manager, session_repo, mock_logger):
        session_repo.deactivate.return_value = False

        await manager.destroy(uuid7())

        mock_logger.info.assert_not_called()

    async def test_destroy_all_returns_count(self, manager, session_repo, clock):
        user_id = uuid7()
        session_repo.deactivate_all_for_user.return_value = 3

        count = await manager.destroy_all(user_id, reason=RevocationReason.ADMIN)

        assert count == 3
        session_repo.deactivate_all_for_user.assert_awaited_once_with(
            user_id, reason="admin", now=clock.now
        )


@pytest.mark.unit
class TestListActive:
    async def test_list_active_projects_summaries(self, manager, session_repo, user):
        _, stored = await _login(manager, session_repo, user)
        session_repo.find_active_by_user.return_value = [stored]

        summaries = await manager.list_active(user.id)

        assert [s.session_id for s in summaries] == [stored.id]
        assert summaries[0].device_info == "Chrome on Mac OS X"
        session_repo.touch_activity.assert_not_called()
