"""Core errors package.

Usage:
    from src.core.errors import DomainError, StoreUnavailableError
"""

from src.core.errors.domain_error import DomainError
from src.core.errors.store_fault import StoreUnavailableError

__all__ = [
    "DomainError",
    "StoreUnavailableError",
]
