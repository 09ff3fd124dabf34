"""Request/response transport for token material.

The session manager never sees cookies or headers; it reads presented tokens
and writes rotated ones through this port.
"""

from typing import Protocol

from src.domain.protocols.token_issuer_protocol import TokenPair


class TokenTransport(Protocol):
    """Where tokens are read from and written to for one request."""

    def read_access_token(self) -> str | None:
        ...

    def read_refresh_token(self) -> str | None:
        ...

    def write_tokens(self, tokens: TokenPair) -> None:
        """Hand a rotated pair back to the client."""
        ...

    def clear(self) -> None:
        """Remove token material from the client."""
        ...
