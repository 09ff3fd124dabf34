"""Timeouts and fault mapping for repository calls.

Every repository method that talks to the database is wrapped with
``store_operation``. The wrapper:

- bounds the call with ``asyncio.timeout``
- maps connection failures and timeouts to ``StoreUnavailableError``
- retries read-only calls a configurable number of times
- rolls the session back after a fault so it can be reused

Integrity and programming errors are not store faults and propagate
unchanged. A timeout never turns into "not found": callers must not
authenticate a user, or lock an account, because the database was slow.
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Concatenate, ParamSpec, TypeVar

import structlog
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.enums import ErrorCode
from src.core.errors import StoreUnavailableError
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import DatabaseError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


@dataclass(frozen=True, slots=True, kw_only=True)
class StorePolicy:
    """Per-call limits for store operations.

    Attributes:
        timeout_seconds: Upper bound for one call, commit included.
        read_retries: Extra attempts for read-only calls after a fault.
        retry_backoff_seconds: Pause between attempts.
    """

    timeout_seconds: float = 5.0
    read_retries: int = 1
    retry_backoff_seconds: float = 0.05


DEFAULT_STORE_POLICY = StorePolicy()


class GuardedRepository:
    """Base for repositories whose methods use ``store_operation``.

    Attributes:
        _session: SQLAlchemy async session.
        _policy: Timeout and retry limits.
    """

    def __init__(
        self, session: AsyncSession, policy: StorePolicy = DEFAULT_STORE_POLICY
    ) -> None:
        self._session = session
        self._policy = policy


async def _discard_transaction(session: AsyncSession, operation: str) -> None:
    try:
        await session.rollback()
    except SQLAlchemyError as exc:
        logger.warning(
            "store_rollback_failed",
            operation=operation,
            error_type=type(exc).__name__,
        )


def store_operation(
    operation: str, *, read_only: bool = False
) -> Callable[
    [Callable[Concatenate[Any, P], Awaitable[R]]],
    Callable[Concatenate[Any, P], Awaitable[R]],
]:
    """Wrap a repository coroutine with timeout, retry and fault mapping.

    Args:
        operation: Name used in logs and in the raised fault.
        read_only: Allow retries (only safe for calls without side effects).
    """

    def decorator(
        func: Callable[Concatenate[Any, P], Awaitable[R]],
    ) -> Callable[Concatenate[Any, P], Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(self: GuardedRepository, *args: P.args, **kwargs: P.kwargs) -> R:
            policy = self._policy
            attempts = 1 + (policy.read_retries if read_only else 0)
            last_error: Exception | None = None
            infrastructure_code = InfrastructureErrorCode.DATABASE_ERROR

            for attempt in range(1, attempts + 1):
                try:
                    async with asyncio.timeout(policy.timeout_seconds):
                        return await func(self, *args, **kwargs)
                except TimeoutError as exc:
                    infrastructure_code = InfrastructureErrorCode.DATABASE_TIMEOUT
                    last_error = exc
                except (OperationalError, InterfaceError, OSError) as exc:
                    infrastructure_code = (
                        InfrastructureErrorCode.DATABASE_CONNECTION_FAILED
                    )
                    last_error = exc

                await _discard_transaction(self._session, operation)
                logger.warning(
                    "store_operation_failed",
                    operation=operation,
                    attempt=attempt,
                    attempts=attempts,
                    infrastructure_code=infrastructure_code.value,
                    error_type=type(last_error).__name__,
                )
                if attempt < attempts:
                    await asyncio.sleep(policy.retry_backoff_seconds)

            fault = DatabaseError(
                code=ErrorCode.STORE_UNAVAILABLE,
                message="Session store unavailable",
                infrastructure_code=infrastructure_code,
                details={"operation": operation},
            )
            raise StoreUnavailableError(fault, operation=operation) from last_error

        return wrapper

    return decorator
