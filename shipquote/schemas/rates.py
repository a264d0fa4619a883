"""
Rate Schemas

Carrier-agnostic request and quote models shared by the adapters, the
rate orchestrator and the HTTP layer.

Used for:
- Describing a package to quote (RateRequest, ShippingOptions)
- The normalized quote every adapter returns (ShippingRate, Fee)
- The aggregated answer of one orchestration call (RateResponse)
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from shipquote.core.enums import (
    CarrierName,
    DimensionUnit,
    FeeType,
    ServiceSpeed,
    WeightUnit,
)
from shipquote.schemas.base import FrozenSchema


class Dimensions(FrozenSchema):
    """Box dimensions"""
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    unit: DimensionUnit = DimensionUnit.IN


class Address(FrozenSchema):
    """Optional street-level address; only some carriers use it"""
    street1: str = ""
    city: str = ""
    state: str = ""
    postal_code: Optional[str] = None
    country: Optional[str] = None


class RateRequest(FrozenSchema):
    """
    A single, already validated quote request.

    ``carriers`` restricts the quote to a subset of carriers; when omitted
    every configured carrier is asked.
    """
    origin_postal_code: str
    destination_postal_code: str
    weight: float = Field(gt=0)
    weight_unit: WeightUnit = WeightUnit.LB
    dimensions: Optional[Dimensions] = None
    declared_value: Optional[float] = Field(default=None, ge=0)
    carriers: Optional[List[CarrierName]] = None
    origin_address: Optional[Address] = None
    destination_address: Optional[Address] = None


class ShippingOptions(FrozenSchema):
    """Requested speed tier and optional paid services"""
    speed: ServiceSpeed = ServiceSpeed.STANDARD
    signature_required: bool = False
    fragile_handling: bool = False
    saturday_delivery: bool = False
    declared_value: Optional[float] = Field(default=None, ge=0)


class Fee(FrozenSchema):
    """An itemized charge on top of a base rate"""
    type: FeeType
    amount: float = Field(ge=0)
    description: str

    @field_validator("amount")
    @classmethod
    def round_amount(cls, v: float) -> float:
        """Fees are stored to the cent"""
        return round(v, 2)


class ShippingRate(FrozenSchema):
    """
    Standardized shipping rate model

    Contains all information about a shipping rate option
    from any carrier. ``total_cost`` always equals ``base_rate`` plus the
    sum of ``additional_fees``.
    """
    id: str
    carrier: CarrierName
    service_code: str
    service_name: str
    speed: ServiceSpeed = ServiceSpeed.STANDARD
    features: List[str] = []
    base_rate: float
    additional_fees: List[Fee] = []
    total_cost: float
    estimated_delivery_date: date
    guaranteed_delivery: bool = False

    @property
    def display_price(self) -> str:
        return f"${self.total_cost:.2f}"


class CarrierErrorDetail(FrozenSchema):
    """A carrier that could not be quoted, as reported to the caller"""
    carrier: CarrierName
    message: str
    recoverable: bool


class RateResponse(FrozenSchema):
    """Merged result of one multi-carrier quote"""
    request_id: str
    rates: List[ShippingRate] = []
    errors: List[CarrierErrorDetail] = []
    timestamp: datetime


class RateQuoteBody(FrozenSchema):
    """Body of ``POST /api/rates``"""
    request: RateRequest
    options: ShippingOptions = ShippingOptions()
