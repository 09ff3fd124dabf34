"""Client context captured when a session is created."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Where a login came from.

    Attributes:
        ip_address: Client IP (first X-Forwarded-For hop when trusted).
        user_agent: Raw User-Agent header.
        device_info: Human-readable device summary ("Chrome on Mac OS X").
        device_type: "mobile", "tablet", "desktop" or "other".
    """

    ip_address: str | None = None
    user_agent: str | None = None
    device_info: str | None = None
    device_type: str | None = None
