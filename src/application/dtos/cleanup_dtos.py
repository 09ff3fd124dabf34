"""Cleanup DTOs.

Results of the periodic sweep and of the statistics query.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True)
class CleanupReport:
    """Outcome of one cleanup run.

    A task that failed reports 0 and is listed in ``failed_tasks``.

    Attributes:
        expired_sessions: Dead sessions deleted.
        inactive_sessions: Inactive sessions past the retention window deleted.
        superseded_tokens: Rotated-out refresh fingerprints forgotten.
        stale_locks: Accounts whose long-expired lock was cleared.
        failed_tasks: Names of tasks that hit a store fault.
    """

    expired_sessions: int = 0
    inactive_sessions: int = 0
    superseded_tokens: int = 0
    stale_locks: int = 0
    failed_tasks: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_reclaimed(self) -> int:
        return (
            self.expired_sessions
            + self.inactive_sessions
            + self.superseded_tokens
            + self.stale_locks
        )


@dataclass(frozen=True, kw_only=True)
class CleanupStatistics:
    """Session counts by state.

    ``expired`` overlaps ``active``/``inactive``; it counts rows whose refresh
    token has run out and which the next sweep will delete.
    """

    active: int
    inactive: int
    expired: int
    total: int
