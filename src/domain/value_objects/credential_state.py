"""Credential lockout state and its transition rules.

Pure data plus pure functions: nothing here touches persistence or the clock.
The lockout service reads a ``CredentialState`` from the user store, computes
the next state with these functions and writes it back with a conditional
update, so the rules can be tested without a database.

State machine:
    Unlocked(n)  --failure, n+1 < threshold-->   Unlocked(n+1)
    Unlocked(n)  --failure, n+1 >= threshold-->  Locked(now + duration), attempts n+1
    any          --success-->                    Unlocked(0)
    Locked(past) --any attempt-->                decays to Unlocked(1) first
    Locked(future)                               attempt rejected, password not checked
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

LOCK_THRESHOLD = 5
LOCK_DURATION = timedelta(hours=2)


@dataclass(frozen=True, slots=True, kw_only=True)
class LockoutPolicy:
    """Lockout tuning.

    Attributes:
        threshold: Consecutive failures that lock the account.
        duration: How long the lock lasts.
    """

    threshold: int = LOCK_THRESHOLD
    duration: timedelta = LOCK_DURATION

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError("threshold must be at least 1")
        if self.duration <= timedelta(0):
            raise ValueError("duration must be positive")


DEFAULT_POLICY = LockoutPolicy()


@dataclass(frozen=True, slots=True, kw_only=True)
class CredentialState:
    """Lockout counters for one account.

    Attributes:
        failed_login_attempts: Consecutive failures since the last success or
            lock expiry. Kept at its final value while locked, for audit.
        locked_until: End of the current lock, or None.
    """

    failed_login_attempts: int = 0
    locked_until: datetime | None = None

    def __post_init__(self) -> None:
        if self.failed_login_attempts < 0:
            raise ValueError("failed_login_attempts cannot be negative")

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now

    def lock_expired(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until <= now


@dataclass(frozen=True, slots=True, kw_only=True)
class LockStatus:
    """Answer to "may this account attempt a login right now?".

    Attributes:
        locked: True while a lock is in force.
        locked_until: End of the lock when locked, else None.
        retry_after_seconds: Whole seconds until the lock ends (0 if unlocked).
    """

    locked: bool
    locked_until: datetime | None = None
    retry_after_seconds: int = 0


UNLOCKED = LockStatus(locked=False)


def lock_status(state: CredentialState, now: datetime) -> LockStatus:
    """Evaluate whether ``state`` blocks an attempt at ``now``.

    An expired lock reports as unlocked; clearing it is left to the next
    recorded attempt.
    """
    if not state.is_locked(now):
        return UNLOCKED

    assert state.locked_until is not None
    remaining = (state.locked_until - now).total_seconds()
    return LockStatus(
        locked=True,
        locked_until=state.locked_until,
        retry_after_seconds=max(1, math.ceil(remaining)),
    )


def register_failure(
    state: CredentialState,
    now: datetime,
    policy: LockoutPolicy = DEFAULT_POLICY,
) -> CredentialState:
    """Next state after a failed password check.

    Args:
        state: Current state as read from the store.
        now: Time of the attempt.
        policy: Threshold and duration.

    Returns:
        CredentialState: The state to persist. Unchanged if a lock is still
        in force, since such attempts are rejected before counting.
    """
    if state.is_locked(now):
        return state

    if state.lock_expired(now):
        # Expired lock decays; this failure is attempt 1 of a new run.
        attempts = 1
    else:
        attempts = state.failed_login_attempts + 1

    if attempts >= policy.threshold:
        return CredentialState(
            failed_login_attempts=attempts,
            locked_until=now + policy.duration,
        )
    return CredentialState(failed_login_attempts=attempts, locked_until=None)


def register_success(state: CredentialState, now: datetime) -> CredentialState:
    """Next state after a successful password check.

    Any lock must already be expired when this is called; an active lock
    short-circuits the login before the password is examined.

    Raises:
        ValueError: If called while a lock is still in force.
    """
    if state.is_locked(now):
        raise ValueError("cannot register success while the account is locked")
    return CredentialState(failed_login_attempts=0, locked_until=None)
