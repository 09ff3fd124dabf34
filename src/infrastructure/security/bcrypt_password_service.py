"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol with bcrypt.

Architecture:
    - Implements PasswordHashingProtocol (no inheritance required)
    - Injected via dependency container

Security:
    - Adaptive cost factor from settings (12 in production)
    - ``burn_verification`` spends the same hashing work when the account does
      not exist, so response time does not reveal which emails are registered
"""

import bcrypt


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from src.core.container import get_password_service

        password_service = get_password_service()
        password_hash = password_service.hash_password("SecurePass123!")
        password_service.verify_password("SecurePass123!", password_hash)
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor. Each +1 doubles the work;
                4 is the bcrypt minimum and only suitable for tests.

        Raises:
            ValueError: If cost_factor is outside 4..20.
        """
        if cost_factor < 4:
            msg = "Cost factor must be at least 4"
            raise ValueError(msg)
        if cost_factor > 20:
            msg = "Cost factor above 20 is impractically slow"
            raise ValueError(msg)
        self._cost_factor = cost_factor
        self._dummy_hash: bytes | None = None

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password using bcrypt.

        Returns:
            Hashed password string (``$2b$<cost>$...``, 60 characters).
        """
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns:
            True if password matches hash. False on mismatch or on a
            malformed hash (no exceptions for untrusted input).
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except (ValueError, AttributeError):
            return False

    def burn_verification(self, password: str) -> None:
        """Do one verification's worth of work against a throwaway hash."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(
                b"keyhold-dummy-password", bcrypt.gensalt(rounds=self._cost_factor)
            )
        bcrypt.checkpw(password.encode("utf-8"), self._dummy_hash)
