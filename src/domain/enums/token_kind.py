"""Token kinds issued for a session."""

from enum import Enum


class TokenKind(str, Enum):
    """Kind of a session token.

    The value is embedded in the signed payload (``typ`` claim), so a refresh
    token can never be accepted where an access token is expected.
    """

    ACCESS = "access"
    REFRESH = "refresh"
