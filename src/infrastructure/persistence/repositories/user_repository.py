"""UserRepository - SQLAlchemy implementation of UserRepository protocol.

Adapter for hexagonal architecture.
Maps between domain User entities and database User models.

Lockout counters are never written by read-modify-write from Python. The
lockout service computes the next state and this repository applies it with
a compare-and-swap on the current ``(failed_login_attempts, locked_until)``
pair, so concurrent attempts on several replicas serialize in the database.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import and_, func, select, update

from src.domain.entities.user import User
from src.domain.enums import normalize_roles
from src.domain.value_objects.credential_state import CredentialState
from src.infrastructure.persistence.models.user import User as UserModel
from src.infrastructure.persistence.store_guard import (
    GuardedRepository,
    store_operation,
)


def _state_matches(user_id: UUID, expected: CredentialState) -> Any:
    if expected.locked_until is None:
        lock_matches = UserModel.locked_until.is_(None)
    else:
        lock_matches = UserModel.locked_until == expected.locked_until
    return and_(
        UserModel.id == user_id,
        UserModel.failed_login_attempts == expected.failed_login_attempts,
        lock_matches,
    )


class UserRepository(GuardedRepository):
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from UserRepository protocol
    (Protocol uses structural typing).
    """

    @store_operation("users.find_by_id", read_only=True)
    async def find_by_id(self, user_id: UUID) -> User | None:
        stmt = (
            select(UserModel)
            .where(UserModel.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model is not None else None

    @store_operation("users.find_by_email", read_only=True)
    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive)."""
        stmt = (
            select(UserModel)
            .where(func.lower(UserModel.email) == email.strip().lower())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model is not None else None

    @store_operation("users.add")
    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises:
            sqlalchemy.exc.IntegrityError: If the email is already taken.
        """
        self._session.add(self._to_model(user))
        await self._session.commit()

    @store_operation("users.compare_and_set_credential_state")
    async def compare_and_set_credential_state(
        self,
        user_id: UUID,
        *,
        expected: CredentialState,
        new: CredentialState,
    ) -> bool:
        """Apply ``new`` only if the stored counters still equal ``expected``."""
        stmt = (
            update(UserModel)
            .where(_state_matches(user_id, expected))
            .values(
                failed_login_attempts=new.failed_login_attempts,
                locked_until=new.locked_until,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return (cast(Any, result).rowcount or 0) == 1

    @store_operation("users.record_successful_login")
    async def record_successful_login(
        self,
        user_id: UUID,
        *,
        expected: CredentialState,
        now: datetime,
    ) -> bool:
        """Reset counters, clear the lock and stamp last_login_at."""
        stmt = (
            update(UserModel)
            .where(_state_matches(user_id, expected))
            .values(
                failed_login_attempts=0,
                locked_until=None,
                last_login_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return (cast(Any, result).rowcount or 0) == 1

    @store_operation("users.clear_stale_locks")
    async def clear_stale_locks(self, *, expired_before: datetime) -> int:
        """Reset accounts whose lock ended before ``expired_before``.

        Any later attempt would already have cleared such a lock, so these
        accounts have seen no attempt since the lock ran out.
        """
        stmt = (
            update(UserModel)
            .where(
                and_(
                    UserModel.locked_until.is_not(None),
                    UserModel.locked_until < expired_before,
                )
            )
            .values(failed_login_attempts=0, locked_until=None)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    def _to_model(self, user: User) -> UserModel:
        model = UserModel(
            id=user.id,
            email=user.email.strip().lower(),
            password_hash=user.password_hash,
            roles=sorted(role.value for role in user.roles),
            is_active=user.is_active,
            failed_login_attempts=user.failed_login_attempts,
            locked_until=user.locked_until,
            last_login_at=user.last_login_at,
        )
        if user.created_at is not None:
            model.created_at = user.created_at
            model.updated_at = user.updated_at or user.created_at
        return model

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            roles=normalize_roles(model.roles),
            is_active=model.is_active,
            failed_login_attempts=model.failed_login_attempts,
            locked_until=model.locked_until,
            last_login_at=model.last_login_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
