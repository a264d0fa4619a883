"""
Shipping carrier factory to make carrier selection easy
"""
import logging
from typing import Dict, List, Optional, Type

from shipquote.core.carrier_config import CarrierConfig, CarrierCredentials
from shipquote.core.enums import CarrierName
from shipquote.core.exceptions import CarrierNotConfiguredError, CarrierNotSupportedError
from shipquote.services.shipping.base import BaseCarrier
from shipquote.services.shipping.carriers.fedex import FedExCarrier
from shipquote.services.shipping.carriers.ups import UPSCarrier
from shipquote.services.shipping.carriers.usps import USPSCarrier

logger = logging.getLogger(__name__)

CARRIER_CLASSES: Dict[CarrierName, Type[BaseCarrier]] = {
    CarrierName.USPS: USPSCarrier,
    CarrierName.FEDEX: FedExCarrier,
    CarrierName.UPS: UPSCarrier,
}


def _resolve_name(carrier) -> CarrierName:
    try:
        return CarrierName(carrier)
    except ValueError:
        raise CarrierNotSupportedError(f"Carrier '{carrier}' is not supported")


def get_carrier(carrier, credentials: Optional[CarrierCredentials] = None) -> BaseCarrier:
    """
    Factory function to get the appropriate carrier by name

    Args:
        carrier: CarrierName (or its string value)
        credentials: Credentials for the carrier, if any

    Returns:
        An instance of the appropriate carrier class

    Raises:
        CarrierNotSupportedError: If the carrier is not supported
    """
    name = _resolve_name(carrier)
    if name not in CARRIER_CLASSES:
        raise CarrierNotSupportedError(f"Carrier '{carrier}' is not supported")
    return CARRIER_CLASSES[name](credentials)


class CarrierRegistry:
    """Maps each configured carrier to a single adapter instance"""

    def __init__(self, config: CarrierConfig, carrier_classes: Optional[Dict[CarrierName, Type[BaseCarrier]]] = None):
        self.config = config
        self.carrier_classes = carrier_classes if carrier_classes is not None else CARRIER_CLASSES
        self._adapters: Dict[CarrierName, BaseCarrier] = {}

        missing = [name.value for name in CarrierName if name not in self.carrier_classes]
        if missing:
            raise CarrierNotSupportedError(f"No adapter registered for: {', '.join(missing)}")

    def get(self, carrier) -> BaseCarrier:
        """
        Adapter for ``carrier``, built on first use with its configured credentials

        Raises:
            CarrierNotSupportedError: Unknown carrier name
            CarrierNotConfiguredError: Carrier has no credentials in the config lookup
        """
        name = _resolve_name(carrier)

        if name not in self._adapters:
            credentials = self.config.get_credentials(name)
            if credentials is None:
                raise CarrierNotConfiguredError(f"No credentials configured for carrier: {name.value}")
            self._adapters[name] = self.carrier_classes[name](credentials)
            logger.debug(f"Created {self.carrier_classes[name].__name__} adapter")

        return self._adapters[name]

    def available_carriers(self) -> List[CarrierName]:
        return list(self.carrier_classes.keys())
