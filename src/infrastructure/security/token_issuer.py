"""Signed session token issuer (adapter).

Implements TokenIssuerProtocol with PyJWT (HS256) and keyed fingerprints.

Token Strategy:
    - Access and refresh tokens are both signed JWTs
    - Payload: sub (user), sid (session), typ (access|refresh), jti, iat, exp
    - jti carries 128 bits of fresh randomness, so no two tokens are equal
    - The store keeps only HMAC-SHA256 fingerprints, keyed with a subkey
      derived from the signing secret, never the tokens themselves

Security:
    - Expiry is checked against the injected clock, not inside PyJWT, so a
      single code path rejects expired, forged and malformed tokens alike
    - verify() returns None for every failure; callers cannot tell why
    - Fingerprint comparison uses hmac.compare_digest
"""

import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from src.core.clock import Clock, utc_now
from src.domain.enums import TokenKind
from src.domain.protocols.token_issuer_protocol import (
    IssuedToken,
    TokenClaims,
    TokenPair,
)

_FINGERPRINT_CONTEXT = b"keyhold/session-token-fingerprint/v1"
_REQUIRED_CLAIMS = ["sub", "sid", "typ", "jti", "exp"]


class SignedTokenIssuer:
    """Issue, verify and fingerprint session tokens.

    Usage:
        from src.core.container import get_token_issuer

        issuer = get_token_issuer()
        pair = issuer.issue_pair(subject=user.id, session_id=session_id)
        claims = issuer.verify(TokenKind.ACCESS, pair.access.value)
    """

    def __init__(
        self,
        secret_key: str,
        *,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the issuer.

        Args:
            secret_key: Signing secret, at least 32 bytes.
            access_ttl: Access token lifetime.
            refresh_ttl: Refresh token lifetime.
            algorithm: HMAC JWT algorithm.
            clock: Source of the current time.

        Raises:
            ValueError: If the secret is too short or a TTL is not positive.
        """
        if len(secret_key) < 32:
            msg = "Token secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)
        if access_ttl <= timedelta(0) or refresh_ttl <= timedelta(0):
            msg = "Token lifetimes must be positive"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._fingerprint_key = hmac.new(
            secret_key.encode("utf-8"), _FINGERPRINT_CONTEXT, hashlib.sha256
        ).digest()
        self._ttls = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, kind: TokenKind, *, subject: UUID, session_id: UUID) -> IssuedToken:
        """Mint a signed token.

        The returned ``expires_at`` is whole-second, exactly matching the
        ``exp`` claim, so store expiry and token expiry never disagree.
        """
        now = self._clock()
        exp = int((now + self._ttls[kind]).timestamp())
        payload: dict[str, Any] = {
            "sub": str(subject),
            "sid": str(session_id),
            "typ": kind.value,
            "jti": secrets.token_urlsafe(16),
            "iat": int(now.timestamp()),
            "exp": exp,
        }
        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return IssuedToken(
            kind=kind,
            value=token,
            fingerprint=self.fingerprint(token),
            expires_at=datetime.fromtimestamp(exp, UTC),
        )

    def issue_pair(self, *, subject: UUID, session_id: UUID) -> TokenPair:
        return TokenPair(
            access=self.issue(TokenKind.ACCESS, subject=subject, session_id=session_id),
            refresh=self.issue(TokenKind.REFRESH, subject=subject, session_id=session_id),
        )

    def verify(self, kind: TokenKind, token: str) -> TokenClaims | None:
        """Return claims for a genuine, unexpired token of ``kind``, else None."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
        except InvalidTokenError:
            return None

        if payload.get("typ") != kind.value:
            return None

        exp = payload.get("exp")
        if not isinstance(exp, int) or isinstance(exp, bool):
            return None
        expires_at = datetime.fromtimestamp(exp, UTC)
        if expires_at <= self._clock():
            return None

        try:
            subject = UUID(str(payload["sub"]))
            session_id = UUID(str(payload["sid"]))
        except ValueError:
            return None

        return TokenClaims(
            kind=kind,
            subject=subject,
            session_id=session_id,
            expires_at=expires_at,
        )

    def fingerprint(self, token: str) -> str:
        """Keyed one-way digest (64 hex chars) used as the storage key."""
        return hmac.new(
            self._fingerprint_key, token.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def matches(self, token: str, fingerprint: str) -> bool:
        """Constant-time check that ``token`` has ``fingerprint``."""
        return hmac.compare_digest(self.fingerprint(token), fingerprint)
