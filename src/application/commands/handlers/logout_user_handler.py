"""Logout handlers.

Logout marks sessions inactive; rows are kept until the cleanup sweep. Both
the access and the refresh token of a revoked session stop working at once,
because every validation re-reads the session row.

Architecture:
- Application layer ONLY imports from domain layer and application services
"""

from dataclasses import dataclass

from src.application.commands.auth_commands import LogoutAllSessions, LogoutUser
from src.application.services.session_manager import SessionManager
from src.core.errors import DomainError
from src.core.result import Result, Success


@dataclass(frozen=True, kw_only=True)
class LogoutResponse:
    """Response data for successful logout."""

    revoked_count: int
    message: str = "Successfully logged out."


class LogoutUserHandler:
    """Handler for LogoutUser and LogoutAllSessions.

    Logout always succeeds: revoking an already-revoked session is a no-op.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager

    async def handle(self, cmd: LogoutUser) -> Result[LogoutResponse, DomainError]:
        await self._session_manager.destroy(cmd.session_id)
        return Success(value=LogoutResponse(revoked_count=1))

    async def handle_all(
        self, cmd: LogoutAllSessions
    ) -> Result[LogoutResponse, DomainError]:
        """Revoke every session the user has right now.

        Sessions created after this call returns are unaffected.
        """
        count = await self._session_manager.destroy_all(cmd.user_id, reason=cmd.reason)
        return Success(
            value=LogoutResponse(
                revoked_count=count,
                message=f"Revoked {count} session(s).",
            )
        )
