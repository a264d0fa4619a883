"""
Shared enums and constants used across the application.
"""

from enum import Enum


class CarrierName(str, Enum):
    """Closed set of carriers the engine knows how to quote"""
    USPS = "USPS"
    FEDEX = "FedEx"
    UPS = "UPS"

    @property
    def slug(self):
        return self.value.lower()


class ServiceSpeed(str, Enum):
    """Delivery speed tiers used to compare services across carriers"""
    OVERNIGHT = "overnight"
    TWO_DAY = "two-day"
    STANDARD = "standard"
    ECONOMY = "economy"


class FeeType(str, Enum):
    INSURANCE = "insurance"
    SIGNATURE = "signature"
    OTHER = "other"
    SATURDAY_DELIVERY = "saturdayDelivery"
    FUEL = "fuel"


class WeightUnit(str, Enum):
    LB = "lb"
    KG = "kg"


class DimensionUnit(str, Enum):
    IN = "in"
    CM = "cm"
