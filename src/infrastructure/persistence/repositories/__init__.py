"""Repository implementations (SQLAlchemy adapters for domain protocols)."""

from src.infrastructure.persistence.repositories.session_repository import (
    SessionRepository,
)
from src.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "SessionRepository",
    "UserRepository",
]
