"""Device description from User-Agent strings.

Uses the user-agents library. Parsing is fail-open: a session is never
refused because its User-Agent could not be understood.
"""

from dataclasses import dataclass

import structlog
from user_agents import parse as parse_user_agent  # type: ignore[import-untyped]
from user_agents.parsers import UserAgent  # type: ignore[import-untyped]

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceDescription:
    """Parsed device details.

    Attributes:
        device_info: Human-readable summary ("Chrome on Mac OS X").
        device_type: "mobile", "tablet", "desktop", "bot" or "other".
    """

    device_info: str | None = None
    device_type: str | None = None


class UserAgentDeviceEnricher:
    """Parse User-Agent headers into a DeviceDescription."""

    def describe(self, user_agent: str | None) -> DeviceDescription:
        if not user_agent:
            return DeviceDescription()

        try:
            ua: UserAgent = parse_user_agent(user_agent)
        except Exception as e:
            logger.warning(
                "user_agent_parse_failed",
                user_agent=user_agent[:100],
                error_type=type(e).__name__,
            )
            return DeviceDescription()

        return DeviceDescription(
            device_info=self._build_device_info(ua.browser.family, ua.os.family),
            device_type=self._determine_device_type(ua),
        )

    def _determine_device_type(self, ua: UserAgent) -> str:
        if ua.is_bot:
            return "bot"
        if ua.is_mobile:
            return "mobile"
        if ua.is_tablet:
            return "tablet"
        if ua.is_pc:
            return "desktop"
        return "other"

    def _build_device_info(self, browser: str | None, os_name: str | None) -> str | None:
        browser = browser if browser and browser != "Other" else None
        os_name = os_name if os_name and os_name != "Other" else None
        if browser and os_name:
            return f"{browser} on {os_name}"
        if browser:
            return browser
        if os_name:
            return f"Unknown browser on {os_name}"
        return None
