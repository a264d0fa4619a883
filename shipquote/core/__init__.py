"""
Core module exports.
"""
from .enums import (
    CarrierName,
    ServiceSpeed,
    FeeType,
    WeightUnit,
    DimensionUnit
)

from .exceptions import (
    BaseServiceError,
    ShippingServiceError,
    CarrierError,
    CarrierNotSupportedError,
    CarrierNotConfiguredError,
    NoCarriersConfiguredError
)

from .carrier_config import (
    CarrierConfig,
    CarrierCredentials
)
