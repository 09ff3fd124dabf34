"""Periodic cleanup of dead session and lockout state.

Runs as a background asyncio task next to live traffic. Each sweep opens its
own store scope (fresh database session) and runs its tasks one after the
other:

    1. expired sessions: refresh token expired, or inactive with both
       tokens expired
    2. inactive sessions untouched for the retention window
    3. superseded refresh fingerprints whose old token has expired
    4. stale locks: accounts whose lock ran out long ago

Every task is a single predicate DELETE/UPDATE, so sweeps are idempotent and
several replicas may run them at once. No task can match an active session
whose refresh token is unexpired.

A task that fails (store fault or any other database error) is logged and
reported in ``failed_tasks``; the remaining tasks still run. When every task
fails the sweep raises, and the loop logs it and tries again on the next
tick. Only cancellation ends the loop.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import timedelta
from typing import TypeAlias

from src.application.dtos import CleanupReport, CleanupStatistics
from src.core.clock import Clock, utc_now
from src.core.enums import ErrorCode
from src.core.errors import DomainError, StoreUnavailableError
from src.domain.protocols import LoggerProtocol, SessionRepository, UserRepository

INACTIVE_SESSION_RETENTION = timedelta(hours=24)
STALE_LOCK_RETENTION = timedelta(hours=24)
_SWEEP_TASK_COUNT = 4


@dataclass(frozen=True, kw_only=True)
class CleanupStores:
    """Repositories bound to one store scope."""

    session_repo: SessionRepository
    user_repo: UserRepository


StoreScope: TypeAlias = Callable[[], AbstractAsyncContextManager[CleanupStores]]


class CleanupScheduler:
    """Background sweeper with a start/stop lifecycle.

    One instance per process (see ``get_cleanup_scheduler``). ``start`` on a
    running scheduler is a no-op that logs a warning.

    Usage:
        scheduler = get_cleanup_scheduler()
        scheduler.start(timedelta(minutes=60))
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        store_scope: StoreScope,
        logger: LoggerProtocol,
        *,
        clock: Clock = utc_now,
        inactive_retention: timedelta = INACTIVE_SESSION_RETENTION,
        stale_lock_retention: timedelta = STALE_LOCK_RETENTION,
    ) -> None:
        """Initialize scheduler.

        Args:
            store_scope: Factory for an async context yielding repositories.
            logger: Structured logger.
            clock: Source of the current time.
            inactive_retention: How long inactive rows are kept.
            stale_lock_retention: How long after expiry a lock is cleared.
        """
        self._store_scope = store_scope
        self._logger = logger.bind(component="cleanup_scheduler")
        self._clock = clock
        self._inactive_retention = inactive_retention
        self._stale_lock_retention = stale_lock_retention
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval: timedelta) -> bool:
        """Start the periodic loop on the running event loop.

        The first sweep runs immediately.

        Returns:
            True if started, False if it was already running.

        Raises:
            ValueError: If ``interval`` is not positive.
        """
        if interval <= timedelta(0):
            raise ValueError("cleanup interval must be positive")
        if self.is_running:
            self._logger.warning("Cleanup scheduler already running")
            return False

        self._task = asyncio.create_task(
            self._run_forever(interval), name="session-cleanup"
        )
        self._logger.info(
            "Cleanup scheduler started",
            interval_seconds=int(interval.total_seconds()),
        )
        return True

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish. Safe to call twice."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        except Exception as e:
            # The loop already died; shutdown must still proceed.
            self._logger.error(
                "Cleanup scheduler ended with an error",
                error=e,
                error_type=type(e).__name__,
            )
        self._logger.info("Cleanup scheduler stopped")

    async def run_cleanup(self) -> CleanupReport:
        """Run one full sweep.

        Raises:
            StoreUnavailableError: If every task failed.
        """
        now = self._clock()
        failed: list[str] = []

        async with self._store_scope() as stores:
            expired = await self._guarded(
                "expired_sessions", failed, lambda: stores.session_repo.delete_expired(now)
            )
            inactive = await self._guarded(
                "inactive_sessions",
                failed,
                lambda: stores.session_repo.delete_inactive(
                    updated_before=now - self._inactive_retention
                ),
            )
            superseded = await self._guarded(
                "superseded_tokens",
                failed,
                lambda: stores.session_repo.delete_superseded(now),
            )
            stale_locks = await self._guarded(
                "stale_locks",
                failed,
                lambda: stores.user_repo.clear_stale_locks(
                    expired_before=now - self._stale_lock_retention
                ),
            )

        report = CleanupReport(
            expired_sessions=expired,
            inactive_sessions=inactive,
            superseded_tokens=superseded,
            stale_locks=stale_locks,
            failed_tasks=tuple(failed),
        )

        if len(failed) == _SWEEP_TASK_COUNT:
            error = DomainError(
                code=ErrorCode.STORE_UNAVAILABLE,
                message="Every cleanup task failed",
                details={"failed_tasks": failed},
            )
            raise StoreUnavailableError(error, operation="cleanup.run")

        self._logger.info(
            "Cleanup sweep completed",
            expired_sessions=report.expired_sessions,
            inactive_sessions=report.inactive_sessions,
            superseded_tokens=report.superseded_tokens,
            stale_locks=report.stale_locks,
            total_reclaimed=report.total_reclaimed,
            failed_tasks=list(report.failed_tasks),
        )
        return report

    async def force_cleanup_inactive(self) -> int:
        """Delete every inactive session now, ignoring the retention window."""
        async with self._store_scope() as stores:
            deleted = await stores.session_repo.delete_inactive()
        self._logger.info("Forced inactive session cleanup", deleted_count=deleted)
        return deleted

    async def cleanup_statistics(self) -> CleanupStatistics:
        async with self._store_scope() as stores:
            stats = await stores.session_repo.statistics(self._clock())
        return CleanupStatistics(
            active=stats.active,
            inactive=stats.inactive,
            expired=stats.expired,
            total=stats.total,
        )

    async def _guarded(
        self,
        task_name: str,
        failed: list[str],
        task: Callable[[], Awaitable[int]],
    ) -> int:
        try:
            return await task()
        except StoreUnavailableError as e:
            self._logger.error(
                "Cleanup task failed",
                error=e,
                task=task_name,
                operation=e.operation,
            )
        except Exception as e:
            # Unmapped driver errors (deadlocks, dropped connections) too.
            self._logger.error(
                "Cleanup task failed",
                error=e,
                task=task_name,
                error_type=type(e).__name__,
            )
        failed.append(task_name)
        return 0

    async def _run_forever(self, interval: timedelta) -> None:
        seconds = interval.total_seconds()
        while True:
            try:
                await self.run_cleanup()
            except StoreUnavailableError as e:
                self._logger.error(
                    "Cleanup sweep failed; retrying next tick",
                    error=e,
                    operation=e.operation,
                )
            except Exception as e:
                self._logger.error(
                    "Cleanup sweep failed; retrying next tick",
                    error=e,
                    error_type=type(e).__name__,
                )
            await asyncio.sleep(seconds)
