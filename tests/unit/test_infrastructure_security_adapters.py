"""Unit tests for BcryptPasswordService and UserAgentDeviceEnricher."""

import pytest

from src.infrastructure.enrichers import DeviceDescription, UserAgentDeviceEnricher
from src.infrastructure.security import BcryptPasswordService

CHROME_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


@pytest.fixture
def password_service() -> BcryptPasswordService:
    return BcryptPasswordService(cost_factor=4)


@pytest.mark.unit
class TestBcryptPasswordService:
    def test_hash_and_verify(self, password_service):
        password_hash = password_service.hash_password("SecurePass123!")

        assert password_hash.startswith("$2b$04$")
        assert password_service.verify_password("SecurePass123!", password_hash)
        assert not password_service.verify_password("WrongPass123!", password_hash)

    def test_hashes_are_salted(self, password_service):
        assert password_service.hash_password("same") != password_service.hash_password(
            "same"
        )

    def test_malformed_hash_is_a_mismatch(self, password_service):
        assert password_service.verify_password("anything", "not-a-bcrypt-hash") is False

    def test_burn_verification_returns_nothing(self, password_service):
        assert password_service.burn_verification("anything") is None
        # Dummy hash is reused on later calls.
        assert password_service.burn_verification("anything") is None

    @pytest.mark.parametrize("cost", [3, 21])
    def test_cost_factor_bounds(self, cost):
        with pytest.raises(ValueError):
            BcryptPasswordService(cost_factor=cost)


@pytest.mark.unit
class TestUserAgentDeviceEnricher:
    def test_desktop_browser(self):
        device = UserAgentDeviceEnricher().describe(CHROME_MAC)

        assert device.device_info == "Chrome on Mac OS X"
        assert device.device_type == "desktop"

    def test_mobile_browser(self):
        device = UserAgentDeviceEnricher().describe(SAFARI_IPHONE)

        assert device.device_type == "mobile"
        assert device.device_info is not None
        assert "iOS" in device.device_info

    @pytest.mark.parametrize("user_agent", [None, ""])
    def test_missing_user_agent(self, user_agent):
        assert UserAgentDeviceEnricher().describe(user_agent) == DeviceDescription()

    def test_unknown_agent_never_raises(self):
        device = UserAgentDeviceEnricher().describe("curl/8.4.0")

        assert isinstance(device, DeviceDescription)
