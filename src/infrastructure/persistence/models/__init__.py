"""Database models for persistence layer.

SQLAlchemy models mapping to database tables. These are infrastructure
concerns and are never imported by the domain layer.

Models Organization:
    - user.py: User credential record
    - session.py: Session record (token fingerprints, expiries, activity)
    - superseded_refresh_token.py: Rotated-out refresh fingerprints

Note:
    Domain entities (dataclasses) live in src/domain/entities/ and are
    mapped to and from these models by the repositories.
"""

from src.infrastructure.persistence.models.session import Session
from src.infrastructure.persistence.models.superseded_refresh_token import (
    SupersededRefreshToken,
)
from src.infrastructure.persistence.models.user import User

__all__ = [
    "Session",
    "SupersededRefreshToken",
    "User",
]
