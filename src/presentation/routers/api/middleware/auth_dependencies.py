"""Session authentication dependencies.

FastAPI dependencies that resolve the caller's identity through the
SessionManager. Every request re-checks the stored session; a revoked or
expired session stops working on its next request.

Variants:
    get_current_identity: access token, then refresh-token rotation as a
        fallback; 401 (and cleared cookies) otherwise
    get_current_identity_optional: same, but None instead of 401
    get_header_identity: Authorization header only, no refresh fallback
    require_roles(...): get_current_identity plus a role check (403)

Usage:
    @router.get("/protected")
    async def protected_route(identity: CurrentIdentity):
        return {"user_id": str(identity.user_id)}

    @router.post("/admin/thing")
    async def admin_route(
        identity: Identity = Depends(require_roles(UserRole.ADMIN)),
    ):
        ...
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from src.application.dtos import Identity
from src.application.services import SessionManager
from src.core.container import get_session_manager
from src.domain.enums import UserRole, normalize_roles
from src.domain.errors import AuthenticationError
from src.presentation.routers.api.middleware.token_transport import (
    CookieTokenTransport,
    SessionRejectedError,
    get_token_transport,
)


async def _resolve(
    transport: CookieTokenTransport, session_manager: SessionManager
) -> tuple[Identity | None, bool]:
    """Identity for the presented tokens, and whether any token was presented."""
    access_token = transport.read_access_token()
    if access_token:
        identity = await session_manager.validate(access_token)
        if identity is not None:
            return identity, True

    refresh_token = transport.read_refresh_token()
    if refresh_token:
        identity = await session_manager.refresh(refresh_token, transport)
        if identity is not None:
            return identity, True

    return None, bool(access_token or refresh_token)


async def get_current_identity(
    request: Request,
    transport: Annotated[CookieTokenTransport, Depends(get_token_transport)],
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Identity:
    """Get the authenticated identity or fail with 401.

    An expired access token with a live refresh token is rotated
    transparently; the new pair is set as cookies on the response.

    Raises:
        SessionRejectedError: 401; cookies are cleared if tokens were sent.
        StoreUnavailableError: Store fault (mapped to 500).
    """
    identity, presented = await _resolve(transport, session_manager)
    if identity is None:
        raise SessionRejectedError(clear_cookies=presented)
    request.state.identity = identity
    return identity


async def get_current_identity_optional(
    request: Request,
    transport: Annotated[CookieTokenTransport, Depends(get_token_transport)],
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Identity | None:
    """Get the identity if authenticated, None otherwise.

    Store faults still propagate; a dead database is not "anonymous".
    """
    identity, presented = await _resolve(transport, session_manager)
    if identity is None and presented:
        transport.clear()
    if identity is not None:
        request.state.identity = identity
    return identity


async def get_header_identity(
    request: Request,
    response: Response,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Identity:
    """Get the identity from ``Authorization: Bearer`` only.

    For API clients that do not use cookies. No refresh fallback and no
    cookie writes.
    """
    transport = CookieTokenTransport(request, response, allow_cookies=False)
    access_token = transport.read_access_token()
    identity = (
        await session_manager.validate(access_token) if access_token else None
    )
    if identity is None:
        raise SessionRejectedError(clear_cookies=False)
    request.state.identity = identity
    return identity


def require_roles(
    *required_roles: UserRole | str,
) -> Callable[..., Awaitable[Identity]]:
    """Create a dependency that requires at least one of ``required_roles``.

    Args:
        *required_roles: Roles (enum members or names); at least one needed.

    Returns:
        Dependency function returning the Identity when a role matches.

    Raises:
        ValueError: If no role is given, or a role name is unknown.
        HTTPException 403: At request time, if no role matches.
    """
    if not required_roles:
        raise ValueError("require_roles() needs at least one role")
    unknown = [
        role
        for role in required_roles
        if not isinstance(role, UserRole) and not UserRole.is_valid(role.strip().lower())
    ]
    if unknown:
        # normalize_roles would drop these and fall back to USER.
        raise ValueError(f"Unknown roles: {unknown}")
    required = normalize_roles(required_roles)

    async def role_checker(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        if not identity.user.has_any_role(required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=AuthenticationError.INSUFFICIENT_PERMISSIONS,
            )
        return identity

    return role_checker


# Type aliases for cleaner route signatures
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
OptionalIdentity = Annotated[Identity | None, Depends(get_current_identity_optional)]
HeaderIdentity = Annotated[Identity, Depends(get_header_identity)]
AdminIdentity = Annotated[Identity, Depends(require_roles(UserRole.ADMIN))]
