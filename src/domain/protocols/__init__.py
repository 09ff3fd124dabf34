"""Domain protocols (ports).

Infrastructure adapters satisfy these structurally; none of them inherit.
"""

from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from src.domain.protocols.session_repository import (
    SessionRepository,
    SessionStatistics,
)
from src.domain.protocols.token_issuer_protocol import (
    IssuedToken,
    TokenClaims,
    TokenIssuerProtocol,
    TokenPair,
)
from src.domain.protocols.token_transport_protocol import TokenTransport
from src.domain.protocols.user_repository import UserRepository

__all__ = [
    "IssuedToken",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "SessionRepository",
    "SessionStatistics",
    "TokenClaims",
    "TokenIssuerProtocol",
    "TokenPair",
    "TokenTransport",
    "UserRepository",
]
