"""Admin cleanup response schemas.

Endpoints:
    GET  /api/v1/admin/cleanup/statistics - Session counts
    POST /api/v1/admin/cleanup/run        - Run one sweep now
    POST /api/v1/admin/cleanup/force      - Delete all inactive sessions
"""

from pydantic import BaseModel, Field

from src.application.dtos import CleanupReport, CleanupStatistics


class CleanupStatisticsResponse(BaseModel):
    """Session counts by state."""

    active: int = Field(..., description="Active sessions with a live refresh token")
    inactive: int = Field(..., description="Inactive sessions awaiting cleanup")
    expired: int = Field(..., description="Sessions whose refresh token has expired")
    total: int = Field(..., description="All session rows")

    @classmethod
    def from_statistics(cls, stats: CleanupStatistics) -> "CleanupStatisticsResponse":
        return cls(
            active=stats.active,
            inactive=stats.inactive,
            expired=stats.expired,
            total=stats.total,
        )


class CleanupRunResponse(BaseModel):
    """Outcome of one cleanup sweep."""

    expired_sessions: int = Field(..., description="Dead sessions deleted")
    inactive_sessions: int = Field(..., description="Old inactive sessions deleted")
    superseded_tokens: int = Field(..., description="Rotated-out fingerprints forgotten")
    stale_locks: int = Field(..., description="Expired account locks cleared")
    total_reclaimed: int = Field(..., description="Sum of all the above")
    failed_tasks: list[str] = Field(
        default_factory=list,
        description="Tasks that hit a store fault",
    )

    @classmethod
    def from_report(cls, report: CleanupReport) -> "CleanupRunResponse":
        return cls(
            expired_sessions=report.expired_sessions,
            inactive_sessions=report.inactive_sessions,
            superseded_tokens=report.superseded_tokens,
            stale_locks=report.stale_locks,
            total_reclaimed=report.total_reclaimed,
            failed_tasks=list(report.failed_tasks),
        )


class CleanupForceResponse(BaseModel):
    """Outcome of a forced inactive-session cleanup."""

    deleted_count: int = Field(..., description="Inactive sessions deleted")
