"""Session manager: create, validate, rotate and revoke sessions.

The store is the source of truth. A token is accepted only if its signature
verifies AND its fingerprint points at an active, unexpired session row
AND the claims agree with that row. Every decision is re-made on each
request from stored state; nothing is cached in process.

Refresh rotation:
    1. Verify the refresh token and find its session by fingerprint
    2. Issue a new pair
    3. Compare-and-swap the stored refresh fingerprint (and expiries); the
       old fingerprint is remembered as superseded
    4. Hand the new pair to the token transport

    Two concurrent refreshes of the same token race on step 3 and exactly one
    wins. A superseded token presented later is rejected and logged as a
    possible theft; the live pair it was rotated into keeps working.

Errors:
    Absence, expiry, forgery and revocation all yield None. Store faults
    propagate as StoreUnavailableError, except the best-effort activity
    touch which is logged and dropped.
"""

from datetime import timedelta
from uuid import UUID

from uuid_extensions import uuid7

from src.application.dtos import Identity, SessionGrant, SessionSummary
from src.core.clock import Clock, utc_now
from src.core.errors import StoreUnavailableError
from src.domain.entities import Session, User
from src.domain.enums import RevocationReason, TokenKind
from src.domain.protocols import (
    LoggerProtocol,
    SessionRepository,
    TokenIssuerProtocol,
    TokenTransport,
    UserRepository,
)
from src.domain.value_objects import RequestContext

ACTIVITY_UPDATE_INTERVAL = timedelta(seconds=60)


class SessionManager:
    """Orchestrates the session lifecycle.

    Usage:
        manager = SessionManager(
            session_repo=session_repo,
            user_repo=user_repo,
            token_issuer=token_issuer,
            logger=logger,
        )
        grant = await manager.create_session(user, context)
        identity = await manager.validate(grant.tokens.access.value)
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        user_repo: UserRepository,
        token_issuer: TokenIssuerProtocol,
        logger: LoggerProtocol,
        *,
        clock: Clock = utc_now,
        activity_interval: timedelta = ACTIVITY_UPDATE_INTERVAL,
    ) -> None:
        """Initialize session manager.

        Args:
            session_repo: Session persistence.
            user_repo: User lookup (status and roles).
            token_issuer: Token signing, verification and fingerprinting.
            logger: Structured logger.
            clock: Source of the current time.
            activity_interval: Minimum age of last_activity_at before a
                validated request rewrites it.
        """
        self._session_repo = session_repo
        self._user_repo = user_repo
        self._token_issuer = token_issuer
        self._logger = logger
        self._clock = clock
        self._activity_interval = activity_interval

    async def create_session(self, user: User, context: RequestContext) -> SessionGrant:
        """Issue a fresh token pair and persist a new active session.

        Every call creates an independent session; concurrent logins of one
        user never share or replace each other's rows.
        """
        now = self._clock()
        session_id: UUID = uuid7()
        tokens = self._token_issuer.issue_pair(subject=user.id, session_id=session_id)

        session = Session(
            id=session_id,
            user_id=user.id,
            access_token_hash=tokens.access.fingerprint,
            refresh_token_hash=tokens.refresh.fingerprint,
            access_token_expires_at=tokens.access.expires_at,
            refresh_token_expires_at=tokens.refresh.expires_at,
            is_active=True,
            last_activity_at=now,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            device_info=context.device_info,
            created_at=now,
            updated_at=now,
        )
        await self._session_repo.add(session)

        self._logger.info(
            "Session created",
            user_id=str(user.id),
            session_id=str(session_id),
            device_type=context.device_type,
        )
        return SessionGrant(identity=Identity(user=user, session=session), tokens=tokens)

    async def validate(self, access_token: str) -> Identity | None:
        """Resolve an access token to an identity, or None."""
        claims = self._token_issuer.verify(TokenKind.ACCESS, access_token)
        if claims is None:
            return None

        fingerprint = self._token_issuer.fingerprint(access_token)
        session = await self._session_repo.find_by_access_fingerprint(fingerprint)
        if session is None:
            return None

        now = self._clock()
        if (
            not self._token_issuer.matches(access_token, session.access_token_hash)
            or not session.is_access_valid(now)
            or session.id != claims.session_id
            or session.user_id != claims.subject
        ):
            return None

        user = await self._user_repo.find_by_id(session.user_id)
        if user is None or not user.is_active:
            return None

        if session.needs_activity_touch(now, self._activity_interval):
            await self._touch_activity(session)

        return Identity(user=user, session=session)

    async def refresh(
        self, refresh_token: str, transport: TokenTransport | None = None
    ) -> Identity | None:
        """Rotate a refresh token into a new pair.

        Args:
            refresh_token: Token presented by the client.
            transport: Receives the new pair on success. Untouched on failure.

        Returns:
            Identity bound to the rotated session, or None.
        """
        claims = self._token_issuer.verify(TokenKind.REFRESH, refresh_token)
        if claims is None:
            return None

        fingerprint = self._token_issuer.fingerprint(refresh_token)
        session = await self._session_repo.find_by_refresh_fingerprint(fingerprint)
        if session is None:
            await self._handle_superseded(fingerprint)
            return None

        now = self._clock()
        if (
            not self._token_issuer.matches(refresh_token, session.refresh_token_hash)
            or not session.can_refresh(now)
            or session.id != claims.session_id
            or session.user_id != claims.subject
        ):
            return None

        user = await self._user_repo.find_by_id(session.user_id)
        if user is None or not user.is_active:
            await self._session_repo.deactivate(
                session.id, reason=RevocationReason.ACCOUNT_INACTIVE.value, now=now
            )
            self._logger.info(
                "Session revoked on refresh for inactive account",
                user_id=str(session.user_id),
                session_id=str(session.id),
            )
            return None

        tokens = self._token_issuer.issue_pair(subject=user.id, session_id=session.id)
        rotated = await self._session_repo.rotate_tokens(
            session.id,
            expected_refresh_hash=session.refresh_token_hash,
            superseded_expires_at=claims.expires_at,
            access_token_hash=tokens.access.fingerprint,
            refresh_token_hash=tokens.refresh.fingerprint,
            access_token_expires_at=tokens.access.expires_at,
            refresh_token_expires_at=tokens.refresh.expires_at,
            now=now,
        )
        if not rotated:
            self._logger.info(
                "Refresh lost rotation race",
                user_id=str(session.user_id),
                session_id=str(session.id),
            )
            return None

        session.access_token_hash = tokens.access.fingerprint
        session.refresh_token_hash = tokens.refresh.fingerprint
        session.access_token_expires_at = tokens.access.expires_at
        session.refresh_token_expires_at = tokens.refresh.expires_at
        session.last_activity_at = now
        session.updated_at = now

        if transport is not None:
            transport.write_tokens(tokens)

        self._logger.info(
            "Session tokens rotated",
            user_id=str(user.id),
            session_id=str(session.id),
        )
        return Identity(user=user, session=session)

    async def destroy(
        self,
        session_id: UUID,
        reason: RevocationReason = RevocationReason.LOGOUT,
    ) -> None:
        """Mark one session inactive. Idempotent; unknown IDs are ignored."""
        deactivated = await self._session_repo.deactivate(
            session_id, reason=reason.value, now=self._clock()
        )
        if deactivated:
            self._logger.info(
                "Session revoked",
                session_id=str(session_id),
                reason=reason.value,
            )

    async def destroy_all(
        self,
        user_id: UUID,
        reason: RevocationReason = RevocationReason.LOGOUT_ALL,
    ) -> int:
        """Deactivate every session of ``user_id`` created up to now.

        Sessions created after the revocation instant stay valid.

        Returns:
            Number of sessions deactivated.
        """
        count = await self._session_repo.deactivate_all_for_user(
            user_id, reason=reason.value, now=self._clock()
        )
        self._logger.info(
            "All sessions revoked",
            user_id=str(user_id),
            reason=reason.value,
            revoked_count=count,
        )
        return count

    async def list_active(self, user_id: UUID) -> list[SessionSummary]:
        """Active sessions of a user, newest first. Never touches activity."""
        sessions = await self._session_repo.find_active_by_user(user_id, self._clock())
        return [SessionSummary.from_session(session) for session in sessions]

    async def _handle_superseded(self, fingerprint: str) -> None:
        session_id = await self._session_repo.find_superseded(fingerprint)
        if session_id is None:
            return

        self._logger.warning(
            "Superseded refresh token presented; rejected",
            session_id=str(session_id),
        )

    async def _touch_activity(self, session: Session) -> None:
        now = self._clock()
        try:
            await self._session_repo.touch_activity(
                session.id,
                now=now,
                stale_before=now - self._activity_interval,
            )
        except StoreUnavailableError as e:
            self._logger.warning(
                "Session activity update failed",
                session_id=str(session.id),
                operation=e.operation,
            )
            return
        session.last_activity_at = now
