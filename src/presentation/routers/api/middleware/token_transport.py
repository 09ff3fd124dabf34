"""Cookie/header token transport and request context extraction.

Tokens travel in httponly cookies. Header-based clients may send the access
token as ``Authorization: Bearer <token>`` instead. Rotated tokens are always
written back as cookies.

Cookie attributes:
    - httponly, samesite=strict
    - secure in production
    - max_age equal to the token lifetime
"""

import ipaddress

from fastapi import HTTPException, Request, Response, status

from src.core.config import settings
from src.core.container import get_device_enricher
from src.domain.errors import AuthenticationError
from src.domain.protocols import TokenPair
from src.domain.value_objects import RequestContext

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

_MAX_USER_AGENT_LENGTH = 512


class SessionRejectedError(HTTPException):
    """401 raised by the authentication gate.

    The exception handler clears the token cookies when ``clear_cookies`` is
    set, since the dependency's own response is discarded on error.
    """

    def __init__(self, *, clear_cookies: bool) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AuthenticationError.INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.clear_cookies = clear_cookies


def clear_token_cookies(response: Response) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="strict",
        )


def bearer_token(request: Request) -> str | None:
    """Token from ``Authorization: Bearer ...``, if well-formed."""
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class CookieTokenTransport:
    """TokenTransport bound to one request/response pair.

    Usage:
        transport = CookieTokenTransport(request, response)
        identity = await session_manager.refresh(
            transport.read_refresh_token(), transport
        )
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        *,
        allow_cookies: bool = True,
    ) -> None:
        """Initialize transport.

        Args:
            request: Incoming request.
            response: Response whose cookies are written.
            allow_cookies: When False only the Authorization header is read.
        """
        self._request = request
        self._response = response
        self._allow_cookies = allow_cookies
        self.written_tokens: TokenPair | None = None

    def read_access_token(self) -> str | None:
        if self._allow_cookies:
            token = self._request.cookies.get(ACCESS_TOKEN_COOKIE)
            if token:
                return token
        return bearer_token(self._request)

    def read_refresh_token(self) -> str | None:
        if not self._allow_cookies:
            return None
        return self._request.cookies.get(REFRESH_TOKEN_COOKIE) or None

    def write_tokens(self, tokens: TokenPair) -> None:
        self.written_tokens = tokens
        self._set_cookie(
            ACCESS_TOKEN_COOKIE,
            tokens.access.value,
            max_age=int(settings.access_token_ttl.total_seconds()),
        )
        self._set_cookie(
            REFRESH_TOKEN_COOKIE,
            tokens.refresh.value,
            max_age=int(settings.refresh_token_ttl.total_seconds()),
        )

    def clear(self) -> None:
        clear_token_cookies(self._response)

    def _set_cookie(self, name: str, value: str, *, max_age: int) -> None:
        self._response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="strict",
        )


def get_token_transport(request: Request, response: Response) -> CookieTokenTransport:
    """FastAPI dependency: cookie-or-header transport for this request."""
    return CookieTokenTransport(request, response)


def client_ip(request: Request) -> str | None:
    """Client IP address.

    The first X-Forwarded-For hop is used when forwarded headers are trusted
    and it parses as an IP address; otherwise the socket peer.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            candidate = forwarded.split(",")[0].strip()
            try:
                return str(ipaddress.ip_address(candidate))
            except ValueError:
                pass
    return request.client.host if request.client else None


def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency: where this request comes from."""
    user_agent = request.headers.get("user-agent")
    if user_agent:
        user_agent = user_agent[:_MAX_USER_AGENT_LENGTH]
    device = get_device_enricher().describe(user_agent)
    return RequestContext(
        ip_address=client_ip(request),
        user_agent=user_agent,
        device_info=device.device_info,
        device_type=device.device_type,
    )
