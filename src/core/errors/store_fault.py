"""Store fault exception.

Absence of a session or an account is routine and travels as ``None`` or
``Failure``. A persistence outage is not: repositories raise
StoreUnavailableError so that callers can never mistake a dead database for
an invalid token or a wrong password.

The exception wraps the ``DomainError`` describing the fault, which keeps the
error data in the same shape as the rest of the codebase.
"""

from src.core.errors.domain_error import DomainError


class StoreUnavailableError(Exception):
    """Persistence layer could not complete an operation.

    Raised on connection failures and on store calls exceeding their
    timeout. Presentation maps it to a 500 problem details response.

    Attributes:
        error: Structured description of the fault.
        operation: Repository operation that failed (e.g. "sessions.rotate").
    """

    def __init__(self, error: DomainError, *, operation: str) -> None:
        super().__init__(f"{operation}: {error}")
        self.error = error
        self.operation = operation
