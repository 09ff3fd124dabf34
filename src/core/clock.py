"""Wall-clock access.

Services take a ``Clock`` so lockout windows and token expiries can be
exercised in tests without sleeping. Production code uses ``utc_now``.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeAlias

Clock: TypeAlias = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)
