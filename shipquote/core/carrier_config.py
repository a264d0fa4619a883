"""
Carrier configuration lookup.

Resolves which carriers are usable and the credentials each adapter should
use. Built once from ``Settings`` (or directly from a mapping in tests) and
passed explicitly into the registry and the rate orchestrator.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from shipquote.core.config import Settings
from shipquote.core.enums import CarrierName

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "demo-"


class CarrierCredentials(BaseModel):
    """Credentials and transport settings for a single carrier"""

    model_config = ConfigDict(frozen=True)

    api_key: str
    api_secret: Optional[str] = None
    account_number: Optional[str] = None
    endpoint: str
    timeout: float = 30.0

    @property
    def uses_placeholder(self) -> bool:
        """True when the key or secret is a demo placeholder rather than a real credential"""
        if not self.api_key or self.api_key.startswith(PLACEHOLDER_PREFIX):
            return True
        return bool(self.api_secret and self.api_secret.startswith(PLACEHOLDER_PREFIX))


class CarrierConfig:
    """Read-only lookup of configured carriers and their credentials"""

    def __init__(self, credentials: Dict[CarrierName, CarrierCredentials]):
        self._credentials = {CarrierName(name): creds for name, creds in credentials.items()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "CarrierConfig":
        """Build the lookup from application settings, skipping disabled or keyless carriers"""
        candidates = {
            CarrierName.USPS: (
                settings.USPS_ENABLED,
                CarrierCredentials(
                    api_key=settings.USPS_API_KEY,
                    endpoint=settings.USPS_ENDPOINT,
                    timeout=settings.CARRIER_TIMEOUT_SECONDS,
                ),
            ),
            CarrierName.FEDEX: (
                settings.FEDEX_ENABLED,
                CarrierCredentials(
                    api_key=settings.FEDEX_API_KEY,
                    api_secret=settings.FEDEX_API_SECRET,
                    account_number=settings.FEDEX_ACCOUNT_NUMBER or None,
                    endpoint=settings.FEDEX_API_BASE_URL,
                    timeout=settings.CARRIER_TIMEOUT_SECONDS,
                ),
            ),
            CarrierName.UPS: (
                settings.UPS_ENABLED,
                CarrierCredentials(
                    api_key=settings.UPS_API_KEY,
                    api_secret=settings.UPS_API_SECRET,
                    account_number=settings.UPS_ACCOUNT_NUMBER or None,
                    endpoint=settings.UPS_ENDPOINT,
                    timeout=settings.CARRIER_TIMEOUT_SECONDS,
                ),
            ),
        }

        credentials = {}
        for carrier, (enabled, creds) in candidates.items():
            if not enabled:
                logger.info(f"{carrier.value} disabled in settings")
                continue
            if not creds.api_key:
                logger.info(f"{carrier.value} has no API key configured")
                continue
            credentials[carrier] = creds

        return cls(credentials)

    def get_credentials(self, carrier: CarrierName) -> Optional[CarrierCredentials]:
        """Credentials for ``carrier``, or None when it is not configured"""
        return self._credentials.get(CarrierName(carrier))

    def configured_carriers(self) -> List[CarrierName]:
        # CarrierName declaration order keeps the dispatch order stable
        return [carrier for carrier in CarrierName if carrier in self._credentials]

    def is_configured(self, carrier: CarrierName) -> bool:
        return CarrierName(carrier) in self._credentials
