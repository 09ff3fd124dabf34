"""Error response builder for RFC 9457 Problem Details.

Converts ``DomainError`` values returned in ``Failure`` results into
JSON responses with the matching HTTP status.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.domain.errors import AccountLockedError
from src.presentation.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.api.v1.errors.problem_details import ProblemDetails

_ERROR_CODE_STATUS: dict[ErrorCode, tuple[int, str]] = {
    ErrorCode.INVALID_INPUT: (status.HTTP_400_BAD_REQUEST, "Bad Request"),
    ErrorCode.VALIDATION_FAILED: (422, "Validation Failed"),
    ErrorCode.USER_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Resource Not Found"),
    ErrorCode.SESSION_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Resource Not Found"),
    ErrorCode.INVALID_CREDENTIALS: (
        status.HTTP_401_UNAUTHORIZED,
        "Authentication Required",
    ),
    ErrorCode.TOKEN_INVALID: (status.HTTP_401_UNAUTHORIZED, "Authentication Required"),
    ErrorCode.SESSION_INVALID: (
        status.HTTP_401_UNAUTHORIZED,
        "Authentication Required",
    ),
    ErrorCode.AUTHENTICATION_FAILED: (
        status.HTTP_401_UNAUTHORIZED,
        "Authentication Required",
    ),
    ErrorCode.ACCOUNT_LOCKED: (status.HTTP_429_TOO_MANY_REQUESTS, "Account Locked"),
    # Inactive accounts are indistinguishable from bad credentials.
    ErrorCode.ACCOUNT_INACTIVE: (
        status.HTTP_401_UNAUTHORIZED,
        "Authentication Required",
    ),
    ErrorCode.PERMISSION_DENIED: (status.HTTP_403_FORBIDDEN, "Access Denied"),
    ErrorCode.STORE_UNAVAILABLE: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
    ),
}


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses.

    Example:
        >>> match result:
        ...     case Failure(error=error):
        ...         return ErrorResponseBuilder.from_domain_error(error, request)
    """

    @staticmethod
    def from_domain_error(error: DomainError, request: Request) -> JSONResponse:
        """Convert a DomainError to an RFC 9457 JSON response.

        AccountLockedError adds a ``Retry-After`` header.
        """
        status_code, title = _ERROR_CODE_STATUS.get(
            error.code,
            (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
        )
        detail = error.message
        if error.code is ErrorCode.ACCOUNT_INACTIVE:
            detail = "Invalid credentials or session"

        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=title,
            status=status_code,
            detail=detail,
            instance=str(request.url.path),
            errors=None,
            trace_id=get_trace_id(),
        )

        headers: dict[str, str] = {}
        if isinstance(error, AccountLockedError):
            headers["Retry-After"] = str(error.retry_after_seconds)
        elif status_code == status.HTTP_401_UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=headers or None,
        )
