"""Domain enums."""

from src.domain.enums.revocation_reason import RevocationReason
from src.domain.enums.token_kind import TokenKind
from src.domain.enums.user_role import UserRole, normalize_roles

__all__ = [
    "RevocationReason",
    "TokenKind",
    "UserRole",
    "normalize_roles",
]
