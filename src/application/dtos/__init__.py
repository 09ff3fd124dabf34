"""Data Transfer Objects (DTOs) for application layer.

DTOs are response/result dataclasses returned by services and handlers.
They transfer data from the application layer to the presentation layer.

Note:
    DTOs are NOT the same as:
    - Domain protocol data types (port interface contracts in domain layer)
    - API schemas (Pydantic models in src/schemas)
"""

from src.application.dtos.auth_dtos import (
    Identity,
    LoginResponse,
    SessionGrant,
    SessionSummary,
)
from src.application.dtos.cleanup_dtos import CleanupReport, CleanupStatistics

__all__ = [
    # Auth DTOs
    "Identity",
    "LoginResponse",
    "SessionGrant",
    "SessionSummary",
    # Cleanup DTOs
    "CleanupReport",
    "CleanupStatistics",
]
