"""Admin session maintenance endpoints.

All endpoints require the admin role.

Endpoints:
    GET    /api/v1/admin/cleanup/statistics       - Session counts
    POST   /api/v1/admin/cleanup/run              - Run one sweep now
    POST   /api/v1/admin/cleanup/force            - Delete all inactive sessions
    DELETE /api/v1/admin/users/{user_id}/sessions - Revoke a user's sessions
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import JSONResponse

from src.application.commands import LogoutAllSessions
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.services import CleanupScheduler
from src.core.container import get_cleanup_scheduler, get_logout_handler
from src.core.result import Failure, Success
from src.domain.enums import RevocationReason
from src.presentation.routers.api.middleware.auth_dependencies import AdminIdentity
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.cleanup_schemas import (
    CleanupForceResponse,
    CleanupRunResponse,
    CleanupStatisticsResponse,
)
from src.schemas.session_schemas import SessionRevokeAllResponse

router = APIRouter(prefix="/admin", tags=["Admin"])

Scheduler = Annotated[CleanupScheduler, Depends(get_cleanup_scheduler)]


@router.get(
    "/cleanup/statistics",
    response_model=CleanupStatisticsResponse,
    summary="Session statistics",
)
async def get_cleanup_statistics(
    _admin: AdminIdentity,
    scheduler: Scheduler,
) -> CleanupStatisticsResponse:
    stats = await scheduler.cleanup_statistics()
    return CleanupStatisticsResponse.from_statistics(stats)


@router.post(
    "/cleanup/run",
    response_model=CleanupRunResponse,
    summary="Run cleanup sweep",
    description="Run one full cleanup sweep immediately.",
)
async def run_cleanup(
    _admin: AdminIdentity,
    scheduler: Scheduler,
) -> CleanupRunResponse:
    report = await scheduler.run_cleanup()
    return CleanupRunResponse.from_report(report)


@router.post(
    "/cleanup/force",
    response_model=CleanupForceResponse,
    summary="Force inactive cleanup",
    description="Delete every inactive session now, ignoring the retention window.",
)
async def force_cleanup(
    _admin: AdminIdentity,
    scheduler: Scheduler,
) -> CleanupForceResponse:
    deleted = await scheduler.force_cleanup_inactive()
    return CleanupForceResponse(deleted_count=deleted)


@router.delete(
    "/users/{user_id}/sessions",
    response_model=SessionRevokeAllResponse,
    summary="Revoke user sessions",
    description="Deactivate every current session of a user.",
)
async def revoke_user_sessions(
    request: Request,
    _admin: AdminIdentity,
    handler: Annotated[LogoutUserHandler, Depends(get_logout_handler)],
    user_id: Annotated[UUID, Path(description="User whose sessions to revoke")],
) -> SessionRevokeAllResponse | JSONResponse:
    """Admin revocation.

    DELETE /api/v1/admin/users/{user_id}/sessions → 200 OK
    """
    result = await handler.handle_all(
        LogoutAllSessions(user_id=user_id, reason=RevocationReason.ADMIN)
    )

    match result:
        case Success(value=logout):
            return SessionRevokeAllResponse(
                revoked_count=logout.revoked_count,
                message=logout.message,
            )
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
