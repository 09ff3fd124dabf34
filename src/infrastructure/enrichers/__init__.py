"""Session enrichers.

Enrichers:
    - UserAgentDeviceEnricher: Parses user agent strings (user-agents library)
"""

from src.infrastructure.enrichers.device_enricher import (
    DeviceDescription,
    UserAgentDeviceEnricher,
)

__all__ = [
    "DeviceDescription",
    "UserAgentDeviceEnricher",
]
