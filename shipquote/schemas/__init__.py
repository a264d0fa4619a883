from .rates import (
    Address,
    CarrierErrorDetail,
    Dimensions,
    Fee,
    RateQuoteBody,
    RateRequest,
    RateResponse,
    ShippingOptions,
    ShippingRate,
)
