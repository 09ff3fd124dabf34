"""Unit tests for CleanupScheduler.

Tests cover:
- A sweep runs every task with the right cutoffs and reports counts
- A failing task is logged and skipped; the others still run
- A sweep where every task fails raises StoreUnavailableError
- Forced inactive cleanup and statistics
- Start/stop lifecycle (double start, double stop, invalid interval)
- Unmapped driver errors neither end the loop nor escape stop()
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import DBAPIError

from src.application.services import CleanupScheduler, CleanupStores
from src.core.enums import ErrorCode
from src.core.errors import DomainError, StoreUnavailableError
from src.domain.protocols import SessionStatistics


def _fault(operation: str) -> StoreUnavailableError:
    return StoreUnavailableError(
        DomainError(code=ErrorCode.STORE_UNAVAILABLE, message="down"),
        operation=operation,
    )


def _driver_error() -> DBAPIError:
    return DBAPIError("DELETE FROM sessions", None, Exception("deadlock detected"))


@pytest.fixture
def session_repo():
    repo = AsyncMock()
    repo.delete_expired.return_value = 3
    repo.delete_inactive.return_value = 2
    repo.delete_superseded.return_value = 5
    repo.statistics.return_value = SessionStatistics(
        active=4, inactive=1, expired=2, total=7
    )
    return repo


@pytest.fixture
def user_repo():
    repo = AsyncMock()
    repo.clear_stale_locks.return_value = 1
    return repo


@pytest.fixture
def scheduler(session_repo, user_repo, mock_logger, clock):
    @asynccontextmanager
    async def store_scope():
        yield CleanupStores(session_repo=session_repo, user_repo=user_repo)

    return CleanupScheduler(
        store_scope=store_scope,
        logger=mock_logger,
        clock=clock,
        inactive_retention=timedelta(hours=24),
        stale_lock_retention=timedelta(hours=24),
    )


@pytest.mark.unit
class TestRunCleanup:
    async def test_sweep_runs_all_tasks(self, scheduler, session_repo, user_repo, clock):
        report = await scheduler.run_cleanup()

        assert report.expired_sessions == 3
        assert report.inactive_sessions == 2
        assert report.superseded_tokens == 5
        assert report.stale_locks == 1
        assert report.total_reclaimed == 11
        assert report.failed_tasks == ()
        session_repo.delete_expired.assert_awaited_once_with(clock.now)
        session_repo.delete_inactive.assert_awaited_once_with(
            updated_before=clock.now - timedelta(hours=24)
        )
        session_repo.delete_superseded.assert_awaited_once_with(clock.now)
        user_repo.clear_stale_locks.assert_awaited_once_with(
            expired_before=clock.now - timedelta(hours=24)
        )

    async def test_failed_task_does_not_stop_the_sweep(
        self, scheduler, session_repo, user_repo, mock_logger
    ):
        session_repo.delete_expired.side_effect = _fault("sessions.delete_expired")

        report = await scheduler.run_cleanup()

        assert report.failed_tasks == ("expired_sessions",)
        assert report.expired_sessions == 0
        assert report.inactive_sessions == 2
        user_repo.clear_stale_locks.assert_awaited_once()
        mock_logger.error.assert_called_once()

    async def test_all_tasks_failing_raises(self, scheduler, session_repo, user_repo):
        session_repo.delete_expired.side_effect = _fault("a")
        session_repo.delete_inactive.side_effect = _fault("b")
        session_repo.delete_superseded.side_effect = _fault("c")
        user_repo.clear_stale_locks.side_effect = _fault("d")

        with pytest.raises(StoreUnavailableError) as exc_info:
            await scheduler.run_cleanup()

        assert exc_info.value.operation == "cleanup.run"

    async def test_sweep_is_repeatable(self, scheduler, session_repo):
        session_repo.delete_expired.return_value = 0

        await scheduler.run_cleanup()
        report = await scheduler.run_cleanup()

        assert report.expired_sessions == 0
        assert session_repo.delete_expired.await_count == 2


@pytest.mark.unit
class TestManualOperations:
    async def test_force_cleanup_ignores_retention(self, scheduler, session_repo):
        deleted = await scheduler.force_cleanup_inactive()

        assert deleted == 2
        session_repo.delete_inactive.assert_awaited_once_with()

    async def test_statistics(self, scheduler, session_repo, clock):
        stats = await scheduler.cleanup_statistics()

        assert (stats.active, stats.inactive, stats.expired, stats.total) == (4, 1, 2, 7)
        session_repo.statistics.assert_awaited_once_with(clock.now)


@pytest.mark.unit
class TestLifecycle:
    async def test_start_runs_first_sweep_and_stop_cancels(
        self, scheduler, session_repo
    ):
        assert scheduler.start(timedelta(hours=1)) is True
        assert scheduler.is_running is True

        # Let the background task run its first sweep.
        for _ in range(10):
            await asyncio.sleep(0)
            if session_repo.delete_expired.await_count:
                break

        await scheduler.stop()

        assert scheduler.is_running is False
        session_repo.delete_expired.assert_awaited()

    async def test_double_start_is_a_warning(self, scheduler, mock_logger):
        scheduler.start(timedelta(hours=1))

        assert scheduler.start(timedelta(hours=1)) is False
        mock_logger.warning.assert_called_once_with("Cleanup scheduler already running")

        await scheduler.stop()

    async def test_stop_is_idempotent(self, scheduler):
        await scheduler.stop()
        scheduler.start(timedelta(hours=1))
        await scheduler.stop()
        await scheduler.stop()

        assert scheduler.is_running is False

    async def test_invalid_interval(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.start(timedelta(0))

    async def test_loop_survives_a_failed_sweep(
        self, scheduler, session_repo, user_repo, mock_logger
    ):
        session_repo.delete_expired.side_effect = _fault("a")
        session_repo.delete_inactive.side_effect = _fault("b")
        session_repo.delete_superseded.side_effect = _fault("c")
        user_repo.clear_stale_locks.side_effect = _fault("d")

        scheduler.start(timedelta(hours=1))
        for _ in range(10):
            await asyncio.sleep(0)
        still_running = scheduler.is_running
        await scheduler.stop()

        assert still_running is True
        logged = [call.args[0] for call in mock_logger.error.call_args_list]
        assert "Cleanup sweep failed; retrying next tick" in logged


@pytest.mark.unit
class TestUnmappedDriverErrors:
    async def test_driver_error_in_task_does_not_stop_the_sweep(
        self, scheduler, session_repo, user_repo, mock_logger
    ):
        session_repo.delete_expired.side_effect = _driver_error()

        report = await scheduler.run_cleanup()

        assert report.failed_tasks == ("expired_sessions",)
        assert report.inactive_sessions == 2
        user_repo.clear_stale_locks.assert_awaited_once()
        mock_logger.error.assert_called_once()

    async def test_loop_keeps_ticking_after_driver_errors(
        self, scheduler, session_repo
    ):
        session_repo.delete_expired.side_effect = _driver_error()

        scheduler.start(timedelta(milliseconds=10))
        await asyncio.sleep(0.1)
        still_running = scheduler.is_running
        await scheduler.stop()

        assert still_running is True
        assert session_repo.delete_expired.await_count > 1

    async def test_failing_store_scope_is_retried_next_tick(
        self, session_repo, user_repo, mock_logger, clock
    ):
        attempts = 0

        @asynccontextmanager
        async def store_scope():
            nonlocal attempts
            attempts += 1
            yield CleanupStores(session_repo=session_repo, user_repo=user_repo)
            raise _driver_error()

        scheduler = CleanupScheduler(
            store_scope=store_scope, logger=mock_logger, clock=clock
        )

        scheduler.start(timedelta(milliseconds=10))
        await asyncio.sleep(0.1)
        still_running = scheduler.is_running
        await scheduler.stop()

        assert still_running is True
        assert attempts > 1
        logged = [call.args[0] for call in mock_logger.error.call_args_list]
        assert "Cleanup sweep failed; retrying next tick" in logged
