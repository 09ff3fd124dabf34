"""Sessions resource router.

RESTful endpoints for session management.

Endpoints:
    POST   /api/v1/sessions         - Create session (login)
    GET    /api/v1/sessions         - List own active sessions
    POST   /api/v1/sessions/refresh - Rotate tokens
    DELETE /api/v1/sessions/current - Delete current session (logout)
    DELETE /api/v1/sessions         - Revoke all own sessions
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.application.commands import LoginUser, LogoutAllSessions, LogoutUser
from src.application.commands.handlers.login_user_handler import LoginUserHandler
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.services import SessionManager
from src.core.config import settings
from src.core.container import (
    get_login_handler,
    get_logout_handler,
    get_session_manager,
)
from src.core.result import Failure, Success
from src.domain.value_objects import RequestContext
from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentIdentity,
    OptionalIdentity,
)
from src.presentation.routers.api.middleware.token_transport import (
    CookieTokenTransport,
    SessionRejectedError,
    get_request_context,
    get_token_transport,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from src.schemas.session_schemas import (
    SessionCreateRequest,
    SessionCreateResponse,
    SessionListResponse,
    SessionRefreshRequest,
    SessionResponse,
    SessionRevokeAllResponse,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])

Transport = Annotated[CookieTokenTransport, Depends(get_token_transport)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionCreateResponse,
    responses={
        401: {"description": "Invalid credentials", "model": ProblemDetails},
        429: {"description": "Account locked", "model": ProblemDetails},
    },
    summary="Create session",
    description="Authenticate with email and password and open a new session.",
)
async def create_session(
    request: Request,
    data: SessionCreateRequest,
    transport: Transport,
    context: Annotated[RequestContext, Depends(get_request_context)],
    handler: Annotated[LoginUserHandler, Depends(get_login_handler)],
) -> SessionCreateResponse | JSONResponse:
    """Create a new session (login).

    POST /api/v1/sessions → 201 Created

    Tokens are set as httponly cookies and echoed in the body.

    Returns:
        SessionCreateResponse on success (201 Created).
        JSONResponse with problem details on failure (401/429).
    """
    result = await handler.handle(
        LoginUser(email=data.email, password=data.password, context=context)
    )

    match result:
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=login):
            transport.write_tokens(login.tokens)
            return SessionCreateResponse(
                session_id=login.session_id,
                access_token=login.tokens.access.value,
                refresh_token=login.tokens.refresh.value,
                token_type=login.token_type,
                expires_in=login.expires_in,
            )


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List sessions",
    description="List the caller's active sessions, newest first.",
)
async def list_sessions(
    identity: CurrentIdentity,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionListResponse:
    """List active sessions.

    GET /api/v1/sessions → 200 OK
    """
    summaries = await session_manager.list_active(identity.user_id)
    sessions = [
        SessionResponse.from_summary(summary, current_session_id=identity.session_id)
        for summary in summaries
    ]
    return SessionListResponse(sessions=sessions, total_count=len(sessions))


@router.post(
    "/refresh",
    response_model=SessionCreateResponse,
    responses={401: {"description": "Refresh rejected", "model": ProblemDetails}},
    summary="Refresh tokens",
    description="Rotate the refresh token into a new token pair.",
)
async def refresh_session(
    transport: Transport,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
    data: SessionRefreshRequest | None = None,
) -> SessionCreateResponse:
    """Rotate tokens.

    POST /api/v1/sessions/refresh → 200 OK

    The presented refresh token is single-use: after this call only the new
    pair works. Presenting the old token again is rejected with 401.
    """
    refresh_token = (data.refresh_token if data else None) or transport.read_refresh_token()
    if not refresh_token:
        raise SessionRejectedError(clear_cookies=False)

    identity = await session_manager.refresh(refresh_token, transport)
    tokens = transport.written_tokens
    if identity is None or tokens is None:
        raise SessionRejectedError(clear_cookies=True)

    return SessionCreateResponse(
        session_id=identity.session_id,
        access_token=tokens.access.value,
        refresh_token=tokens.refresh.value,
        expires_in=int(settings.access_token_ttl.total_seconds()),
    )


@router.delete(
    "/current",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete current session",
    description="Log out of the session bound to the presented token.",
)
async def delete_current_session(
    identity: OptionalIdentity,
    transport: Transport,
    handler: Annotated[LogoutUserHandler, Depends(get_logout_handler)],
) -> None:
    """Logout.

    DELETE /api/v1/sessions/current → 204 No Content

    Idempotent: with no live session there is nothing to revoke, and the
    cookies are cleared all the same.
    """
    if identity is not None:
        await handler.handle(
            LogoutUser(user_id=identity.user_id, session_id=identity.session_id)
        )
    transport.clear()


@router.delete(
    "",
    response_model=SessionRevokeAllResponse,
    summary="Revoke all sessions",
    description="Log out everywhere. Sessions created afterwards are unaffected.",
)
async def delete_all_sessions(
    request: Request,
    identity: CurrentIdentity,
    transport: Transport,
    handler: Annotated[LogoutUserHandler, Depends(get_logout_handler)],
) -> SessionRevokeAllResponse | JSONResponse:
    """Revoke all sessions of the caller, including the current one.

    DELETE /api/v1/sessions → 200 OK
    """
    result = await handler.handle_all(LogoutAllSessions(user_id=identity.user_id))
    transport.clear()

    match result:
        case Success(value=logout):
            return SessionRevokeAllResponse(
                revoked_count=logout.revoked_count,
                message=logout.message,
            )
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
