"""Security infrastructure adapters.

- Password hashing (bcrypt)
- Session token issuing, verification and fingerprinting (PyJWT + HMAC)
"""

from src.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from src.infrastructure.security.token_issuer import SignedTokenIssuer

__all__ = [
    "BcryptPasswordService",
    "SignedTokenIssuer",
]
