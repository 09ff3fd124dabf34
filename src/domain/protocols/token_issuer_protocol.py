"""Token issuer protocol and the values it produces.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (SignedTokenIssuer, PyJWT + HMAC)
    - CPU-bound only, never awaits
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.enums import TokenKind


@dataclass(frozen=True, slots=True, kw_only=True)
class IssuedToken:
    """Freshly minted token.

    Attributes:
        kind: Access or refresh.
        value: Secret material handed to the client. Never persisted.
        fingerprint: One-way digest stored for lookup.
        expires_at: Expiry embedded in the token.
    """

    kind: TokenKind
    value: str
    fingerprint: str
    expires_at: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenPair:
    """Access and refresh token issued together for one session."""

    access: IssuedToken
    refresh: IssuedToken


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenClaims:
    """Verified contents of a token.

    Attributes:
        kind: Token kind from the ``typ`` claim.
        subject: Owning user ID.
        session_id: Session the token was issued for.
        expires_at: Expiry.
    """

    kind: TokenKind
    subject: UUID
    session_id: UUID
    expires_at: datetime


class TokenIssuerProtocol(Protocol):
    """Issue, verify and fingerprint session tokens."""

    def issue(self, kind: TokenKind, *, subject: UUID, session_id: UUID) -> IssuedToken:
        """Mint a token of ``kind`` bound to ``subject`` and ``session_id``."""
        ...

    def issue_pair(self, *, subject: UUID, session_id: UUID) -> TokenPair:
        """Mint an access and a refresh token for one session."""
        ...

    def verify(self, kind: TokenKind, token: str) -> TokenClaims | None:
        """Return claims for a genuine, unexpired token of ``kind``.

        Expired, forged, malformed and wrong-kind tokens all give None.
        """
        ...

    def fingerprint(self, token: str) -> str:
        """One-way digest of ``token`` used as the storage key."""
        ...

    def matches(self, token: str, fingerprint: str) -> bool:
        """Constant-time check that ``token`` has ``fingerprint``."""
        ...
