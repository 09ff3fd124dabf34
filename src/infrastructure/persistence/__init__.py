"""Database persistence infrastructure.

- Base model and timezone-aware datetime type
- Database connection and session management
- Store guard (timeouts and fault mapping for repository calls)
- Repository implementations
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
