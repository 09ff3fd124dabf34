"""Credential lockout service.

Applies the lockout state machine in ``src.domain.value_objects.credential_state``
to stored accounts.

Architecture:
    - Application service (uses the user repository port)
    - Transition rules are pure functions; this service only reads, computes
      and writes back with a compare-and-swap
    - No in-process locks: concurrent attempts, possibly on several replicas,
      serialize on the conditional UPDATE and re-read on conflict

Usage:
    lockout = CredentialLockoutService(user_repo=user_repo, logger=logger)

    status = await lockout.is_locked(user.id)
    if status.locked:
        ...  # reject without checking the password
"""

from uuid import UUID

from src.core.clock import Clock, utc_now
from src.core.enums import ErrorCode
from src.core.errors import DomainError, StoreUnavailableError
from src.domain.protocols import LoggerProtocol, UserRepository
from src.domain.value_objects.credential_state import (
    DEFAULT_POLICY,
    UNLOCKED,
    LockoutPolicy,
    LockStatus,
    lock_status,
    register_failure,
)

# Compare-and-swap rounds before giving up on a hot account.
MAX_CAS_ATTEMPTS = 8


class CredentialLockoutService:
    """Record login outcomes and answer lock queries.

    Unknown users are reported as unlocked and nothing is written; the login
    handler never reaches this service for an email that does not exist.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        logger: LoggerProtocol,
        *,
        policy: LockoutPolicy = DEFAULT_POLICY,
        clock: Clock = utc_now,
        max_attempts: int = MAX_CAS_ATTEMPTS,
    ) -> None:
        """Initialize lockout service.

        Args:
            user_repo: User repository (credential state CAS).
            logger: Structured logger.
            policy: Threshold and lock duration.
            clock: Source of the current time.
            max_attempts: Compare-and-swap rounds per call.
        """
        self._user_repo = user_repo
        self._logger = logger
        self._policy = policy
        self._clock = clock
        self._max_attempts = max_attempts

    async def is_locked(self, user_id: UUID) -> LockStatus:
        """Current lock status. Read-only; an expired lock reports unlocked."""
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            return UNLOCKED
        return lock_status(user.credential_state, self._clock())

    async def record_failure(self, user_id: UUID) -> LockStatus:
        """Count one failed password check.

        Returns:
            LockStatus after the failure. ``locked`` is True when this failure
            reached the threshold (or a lock was already in force).

        Raises:
            StoreUnavailableError: On store faults, or when the account's
                counters kept changing under every compare-and-swap round.
        """
        for _ in range(self._max_attempts):
            user = await self._user_repo.find_by_id(user_id)
            if user is None:
                return UNLOCKED

            now = self._clock()
            current = user.credential_state
            next_state = register_failure(current, now, self._policy)
            if next_state == current:
                # Lock in force; the attempt is not counted.
                return lock_status(current, now)

            applied = await self._user_repo.compare_and_set_credential_state(
                user_id, expected=current, new=next_state
            )
            if not applied:
                continue

            status = lock_status(next_state, now)
            if status.locked:
                self._logger.warning(
                    "Account locked after failed login attempts",
                    user_id=str(user_id),
                    failed_login_attempts=next_state.failed_login_attempts,
                    locked_until=status.locked_until.isoformat()
                    if status.locked_until
                    else None,
                )
            else:
                self._logger.info(
                    "Failed login attempt recorded",
                    user_id=str(user_id),
                    failed_login_attempts=next_state.failed_login_attempts,
                )
            return status

        raise self._contention_fault("lockout.record_failure", user_id)

    async def record_success(self, user_id: UUID) -> LockStatus:
        """Reset counters and stamp last-login after a correct password.

        Returns:
            UNLOCKED when recorded. If a concurrent failure locked the account
            while the password was being checked, the lock wins and its status
            is returned instead; the caller must reject the login.

        Raises:
            StoreUnavailableError: As for ``record_failure``.
        """
        for _ in range(self._max_attempts):
            user = await self._user_repo.find_by_id(user_id)
            if user is None:
                return UNLOCKED

            now = self._clock()
            current = user.credential_state
            status = lock_status(current, now)
            if status.locked:
                return status

            applied = await self._user_repo.record_successful_login(
                user_id, expected=current, now=now
            )
            if applied:
                if current.failed_login_attempts or current.locked_until:
                    self._logger.info(
                        "Credential state reset after successful login",
                        user_id=str(user_id),
                    )
                return UNLOCKED

        raise self._contention_fault("lockout.record_success", user_id)

    def _contention_fault(self, operation: str, user_id: UUID) -> StoreUnavailableError:
        self._logger.error(
            "Credential state kept changing during update",
            user_id=str(user_id),
            operation=operation,
            attempts=self._max_attempts,
        )
        error = DomainError(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Credential state contention",
            details={"operation": operation},
        )
        return StoreUnavailableError(error, operation=operation)
