"""SessionRepository - SQLAlchemy implementation of SessionRepository protocol.

Adapter for hexagonal architecture.
Maps between domain Session entities and database Session models.

Every mutation is one conditional statement:
- rotation is a compare-and-swap on ``refresh_token_hash``
- deactivation only touches rows that are still active
- sweeps delete by predicate and are safe to run from several replicas

Reads use ``populate_existing`` so rows changed by Core UPDATE statements in
the same unit of work are never served stale from the identity map.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import Select, and_, case, delete, func, or_, select, update

from src.domain.entities.session import Session
from src.domain.protocols.session_repository import SessionStatistics
from src.infrastructure.persistence.models.session import Session as SessionModel
from src.infrastructure.persistence.models.superseded_refresh_token import (
    SupersededRefreshToken,
)
from src.infrastructure.persistence.store_guard import (
    GuardedRepository,
    store_operation,
)


def _rowcount(result: Any) -> int:
    return cast(Any, result).rowcount or 0


class SessionRepository(GuardedRepository):
    """SQLAlchemy implementation of SessionRepository protocol.

    This class does NOT inherit from SessionRepository protocol
    (Protocol uses structural typing).

    Example:
        >>> async with database.get_session() as db_session:
        ...     repo = SessionRepository(db_session)
        ...     session = await repo.find_by_refresh_fingerprint(fingerprint)
    """

    async def _one(self, stmt: Select[tuple[SessionModel]]) -> Session | None:
        result = await self._session.execute(
            stmt.execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._to_entity(model)

    @store_operation("sessions.add")
    async def add(self, session: Session) -> None:
        """Insert a new session row."""
        self._session.add(self._to_model(session))
        await self._session.commit()

    @store_operation("sessions.find_by_id", read_only=True)
    async def find_by_id(self, session_id: UUID) -> Session | None:
        return await self._one(select(SessionModel).where(SessionModel.id == session_id))

    @store_operation("sessions.find_by_access_fingerprint", read_only=True)
    async def find_by_access_fingerprint(self, fingerprint: str) -> Session | None:
        return await self._one(
            select(SessionModel).where(SessionModel.access_token_hash == fingerprint)
        )

    @store_operation("sessions.find_by_refresh_fingerprint", read_only=True)
    async def find_by_refresh_fingerprint(self, fingerprint: str) -> Session | None:
        return await self._one(
            select(SessionModel).where(SessionModel.refresh_token_hash == fingerprint)
        )

    @store_operation("sessions.find_superseded", read_only=True)
    async def find_superseded(self, fingerprint: str) -> UUID | None:
        """Return the owning session ID of a rotated-out refresh fingerprint."""
        stmt = select(SupersededRefreshToken.session_id).where(
            SupersededRefreshToken.token_hash == fingerprint
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @store_operation("sessions.find_active_by_user", read_only=True)
    async def find_active_by_user(self, user_id: UUID, now: datetime) -> list[Session]:
        """Active, unexpired sessions of a user, newest first.

        Pure read: last_activity_at is not modified.
        """
        stmt = (
            select(SessionModel)
            .where(
                and_(
                    SessionModel.user_id == user_id,
                    SessionModel.is_active.is_(True),
                    SessionModel.refresh_token_expires_at > now,
                )
            )
            .order_by(SessionModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    @store_operation("sessions.rotate_tokens")
    async def rotate_tokens(
        self,
        session_id: UUID,
        *,
        expected_refresh_hash: str,
        superseded_expires_at: datetime,
        access_token_hash: str,
        refresh_token_hash: str,
        access_token_expires_at: datetime,
        refresh_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        """Compare-and-swap the session's token material.

        The WHERE clause re-checks the expected fingerprint, the active flag
        and the refresh expiry, so a concurrent rotation, logout or expiry
        makes this call a no-op that returns False.
        """
        stmt = (
            update(SessionModel)
            .where(
                and_(
                    SessionModel.id == session_id,
                    SessionModel.refresh_token_hash == expected_refresh_hash,
                    SessionModel.is_active.is_(True),
                    SessionModel.refresh_token_expires_at > now,
                )
            )
            .values(
                access_token_hash=access_token_hash,
                refresh_token_hash=refresh_token_hash,
                access_token_expires_at=access_token_expires_at,
                refresh_token_expires_at=refresh_token_expires_at,
                last_activity_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if _rowcount(result) != 1:
            await self._session.rollback()
            return False

        self._session.add(
            SupersededRefreshToken(
                token_hash=expected_refresh_hash,
                session_id=session_id,
                expires_at=superseded_expires_at,
                created_at=now,
            )
        )
        await self._session.commit()
        return True

    @store_operation("sessions.touch_activity")
    async def touch_activity(
        self, session_id: UUID, *, now: datetime, stale_before: datetime
    ) -> bool:
        """Throttled last_activity_at update (only when stale)."""
        stmt = (
            update(SessionModel)
            .where(
                and_(
                    SessionModel.id == session_id,
                    SessionModel.is_active.is_(True),
                    or_(
                        SessionModel.last_activity_at.is_(None),
                        SessionModel.last_activity_at < stale_before,
                    ),
                )
            )
            .values(last_activity_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return _rowcount(result) > 0

    @store_operation("sessions.deactivate")
    async def deactivate(self, session_id: UUID, *, reason: str, now: datetime) -> bool:
        """Mark one session inactive; False if it already was (or is unknown)."""
        stmt = (
            update(SessionModel)
            .where(
                and_(
                    SessionModel.id == session_id,
                    SessionModel.is_active.is_(True),
                )
            )
            .values(
                is_active=False,
                revoked_at=now,
                revoked_reason=reason,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return _rowcount(result) > 0

    @store_operation("sessions.deactivate_all_for_user")
    async def deactivate_all_for_user(
        self, user_id: UUID, *, reason: str, now: datetime
    ) -> int:
        """Deactivate the user's active sessions created at or before ``now``."""
        stmt = (
            update(SessionModel)
            .where(
                and_(
                    SessionModel.user_id == user_id,
                    SessionModel.is_active.is_(True),
                    SessionModel.created_at <= now,
                )
            )
            .values(
                is_active=False,
                revoked_at=now,
                revoked_reason=reason,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return _rowcount(result)

    @store_operation("sessions.delete_expired")
    async def delete_expired(self, now: datetime) -> int:
        """Delete dead sessions.

        A row is dead when its refresh token has expired, or when it is
        inactive and both of its tokens have expired. Active sessions with a
        live refresh token never match.
        """
        stmt = (
            delete(SessionModel)
            .where(
                or_(
                    SessionModel.refresh_token_expires_at <= now,
                    and_(
                        SessionModel.is_active.is_(False),
                        SessionModel.access_token_expires_at <= now,
                        SessionModel.refresh_token_expires_at <= now,
                    ),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return _rowcount(result)

    @store_operation("sessions.delete_inactive")
    async def delete_inactive(self, *, updated_before: datetime | None = None) -> int:
        """Delete inactive sessions, optionally only those untouched since ``updated_before``."""
        conditions = [SessionModel.is_active.is_(False)]
        if updated_before is not None:
            conditions.append(SessionModel.updated_at < updated_before)

        stmt = (
            delete(SessionModel)
            .where(and_(*conditions))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return _rowcount(result)

    @store_operation("sessions.delete_superseded")
    async def delete_superseded(self, now: datetime) -> int:
        """Forget rotated-out fingerprints that expired or lost their session."""
        stmt = (
            delete(SupersededRefreshToken)
            .where(
                or_(
                    SupersededRefreshToken.expires_at <= now,
                    SupersededRefreshToken.session_id.not_in(select(SessionModel.id)),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return _rowcount(result)

    @store_operation("sessions.statistics", read_only=True)
    async def statistics(self, now: datetime) -> SessionStatistics:
        """Count sessions by state in one round-trip."""

        def _count_where(condition: Any) -> Any:
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        stmt = select(
            func.count(SessionModel.id),
            _count_where(
                and_(
                    SessionModel.is_active.is_(True),
                    SessionModel.refresh_token_expires_at > now,
                )
            ),
            _count_where(SessionModel.is_active.is_(False)),
            _count_where(SessionModel.refresh_token_expires_at <= now),
        )
        row = (await self._session.execute(stmt)).one()
        total, active, inactive, expired = (int(value) for value in row)
        return SessionStatistics(
            active=active,
            inactive=inactive,
            expired=expired,
            total=total,
        )

    def _to_model(self, session: Session) -> SessionModel:
        model = SessionModel(
            id=session.id,
            user_id=session.user_id,
            access_token_hash=session.access_token_hash,
            refresh_token_hash=session.refresh_token_hash,
            access_token_expires_at=session.access_token_expires_at,
            refresh_token_expires_at=session.refresh_token_expires_at,
            is_active=session.is_active,
            last_activity_at=session.last_activity_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            device_info=session.device_info,
            revoked_at=session.revoked_at,
            revoked_reason=session.revoked_reason,
        )
        if session.created_at is not None:
            model.created_at = session.created_at
            model.updated_at = session.updated_at or session.created_at
        return model

    def _to_entity(self, model: SessionModel) -> Session:
        return Session(
            id=model.id,
            user_id=model.user_id,
            access_token_hash=model.access_token_hash,
            refresh_token_hash=model.refresh_token_hash,
            access_token_expires_at=model.access_token_expires_at,
            refresh_token_expires_at=model.refresh_token_expires_at,
            is_active=model.is_active,
            last_activity_at=model.last_activity_at,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            device_info=model.device_info,
            revoked_at=model.revoked_at,
            revoked_reason=model.revoked_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
