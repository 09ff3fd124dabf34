"""Login handler for User Authentication.

Flow:
1. Find user by email
2. Unknown email: burn one bcrypt verification, fail with generic error
3. Check lock status (before the password is examined)
4. Verify password
5. Wrong password: record the failure, fail with generic error. The failure
   that locks the account also revokes every session it holds
6. Inactive account: fail with generic error (no counters touched)
7. Record success (resets counters, stamps last login)
8. Create session and return its token pair

Every rejection except a lock reports the same INVALID_CREDENTIALS error, so
a caller cannot learn whether an email exists or an account is disabled.

Architecture:
- Application layer ONLY imports from domain layer and application services
- NO infrastructure imports (repositories are injected via protocols)
"""

from src.application.commands.auth_commands import LoginUser
from src.application.dtos import LoginResponse
from src.application.services.credential_lockout_service import (
    CredentialLockoutService,
)
from src.application.services.session_manager import SessionManager
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import RevocationReason
from src.domain.errors import AccountLockedError, AuthenticationError
from src.domain.protocols import (
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)
from src.domain.value_objects import LockStatus

INVALID_CREDENTIALS = DomainError(
    code=ErrorCode.INVALID_CREDENTIALS,
    message=AuthenticationError.INVALID_CREDENTIALS,
)


class LoginUserHandler:
    """Handler for user login command.

    Follows hexagonal architecture:
    - Application layer (this handler)
    - Domain layer (User entity, protocols)
    - Infrastructure layer (repositories, services via dependency injection)
    """

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        lockout_service: CredentialLockoutService,
        session_manager: SessionManager,
        logger: LoggerProtocol,
        *,
        access_token_ttl_seconds: int = 900,
    ) -> None:
        """Initialize login handler with dependencies.

        Args:
            user_repo: User lookup by email.
            password_service: Password verification.
            lockout_service: Lock checks and outcome recording.
            session_manager: Session creation.
            logger: Structured logger.
            access_token_ttl_seconds: Reported as ``expires_in``.
        """
        self._user_repo = user_repo
        self._password_service = password_service
        self._lockout_service = lockout_service
        self._session_manager = session_manager
        self._logger = logger
        self._access_token_ttl_seconds = access_token_ttl_seconds

    async def handle(self, cmd: LoginUser) -> Result[LoginResponse, DomainError]:
        """Handle user login command.

        Args:
            cmd: LoginUser command.

        Returns:
            Success(LoginResponse) on successful login.
            Failure(AccountLockedError) while the account is locked.
            Failure(DomainError) with INVALID_CREDENTIALS otherwise.

        Raises:
            StoreUnavailableError: If the store cannot be reached. A login is
                never granted, and a failure never counted, on a store fault.
        """
        user = await self._user_repo.find_by_email(cmd.email)
        if user is None:
            self._password_service.burn_verification(cmd.password)
            self._logger.warning(
                "Login failed",
                reason="unknown_email",
                ip_address=cmd.context.ip_address,
            )
            return Failure(error=INVALID_CREDENTIALS)

        status = await self._lockout_service.is_locked(user.id)
        if status.locked:
            return self._locked(user, status, cmd)

        if not self._password_service.verify_password(cmd.password, user.password_hash):
            status = await self._lockout_service.record_failure(user.id)
            self._logger.warning(
                "Login failed",
                reason="invalid_password",
                user_id=str(user.id),
                ip_address=cmd.context.ip_address,
            )
            if status.locked:
                revoked = await self._session_manager.destroy_all(
                    user.id, RevocationReason.ACCOUNT_LOCKED
                )
                self._logger.warning(
                    "Account locked; sessions revoked",
                    user_id=str(user.id),
                    revoked_count=revoked,
                )
            return Failure(error=INVALID_CREDENTIALS)

        if not user.is_active:
            self._logger.warning(
                "Login failed",
                reason="account_inactive",
                user_id=str(user.id),
                ip_address=cmd.context.ip_address,
            )
            return Failure(error=INVALID_CREDENTIALS)

        status = await self._lockout_service.record_success(user.id)
        if status.locked:
            # Locked by a concurrent failure while the password was checked.
            return self._locked(user, status, cmd)

        grant = await self._session_manager.create_session(user, cmd.context)
        self._logger.info(
            "User logged in",
            user_id=str(user.id),
            session_id=str(grant.identity.session_id),
        )
        return Success(
            value=LoginResponse(
                user_id=user.id,
                session_id=grant.identity.session_id,
                tokens=grant.tokens,
                expires_in=self._access_token_ttl_seconds,
            )
        )

    def _locked(
        self, user: User, status: LockStatus, cmd: LoginUser
    ) -> Failure[DomainError]:
        assert status.locked_until is not None
        self._logger.warning(
            "Login failed",
            reason="account_locked",
            user_id=str(user.id),
            retry_after_seconds=status.retry_after_seconds,
            ip_address=cmd.context.ip_address,
        )
        return Failure(
            error=AccountLockedError(
                code=ErrorCode.ACCOUNT_LOCKED,
                message=AuthenticationError.ACCOUNT_LOCKED,
                locked_until=status.locked_until,
                retry_after_seconds=status.retry_after_seconds,
            )
        )
