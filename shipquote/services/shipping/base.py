"""
Base Carrier Interface

This module defines the abstract base class that all shipping carrier
implementations must implement.

Each carrier implementation turns a carrier's native rate answer into the
canonical ShippingRate record. The base class provides the shared pieces:
- The fetch_rates template (call carrier, adapt, classify failures)
- Live-vs-sample selection based on the configured credentials
- HTTP transport with the carrier's timeout
- Unit conversion, rate-tier selection and delivery-date helpers
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import httpx

from shipquote.core.carrier_config import CarrierCredentials
from shipquote.core.enums import CarrierName, DimensionUnit, WeightUnit
from shipquote.core.exceptions import CarrierError
from shipquote.schemas.rates import Dimensions, RateRequest, ShippingRate

logger = logging.getLogger(__name__)

T = TypeVar("T")

KG_TO_LB = 2.20462
CM_TO_IN = 1 / 2.54

DEFAULT_TRANSIT_DAYS = 3

# Rate tiers in order of preference; not configurable per carrier
RATE_TIER_PREFERENCE = ("ACCOUNT", "LIST")

RECOVERABLE_MARKERS = (
    "timeout",
    "timed out",
    "econnrefused",
    "connection refused",
    "enotfound",
    "name or service not known",
    "dns",
    "network",
)


def is_transport_failure(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in RECOVERABLE_MARKERS)


def classify_carrier_error(carrier: str, error: Exception) -> CarrierError:
    """
    Convert any adapter failure into a CarrierError.

    Transport failures (timeouts, refused connections, DNS lookups, generic
    network faults) are recoverable. Everything else - validation failures,
    authentication failures, carrier business-rule rejections - is not.
    """
    if isinstance(error, CarrierError):
        return error

    message = str(error) or error.__class__.__name__

    if isinstance(error, (httpx.TimeoutException, httpx.NetworkError)):
        return CarrierError(carrier, message, recoverable=True)

    return CarrierError(carrier, message, recoverable=is_transport_failure(message))


def select_preferred_tier(tiers: Sequence[T], tier_of) -> Optional[T]:
    """
    Pick the account (negotiated) figure if present, else the list
    (published) figure, else the first available one.

    Args:
        tiers: Candidate rate entries
        tier_of: Callable returning an entry's tier name
    """
    if not tiers:
        return None
    for preferred in RATE_TIER_PREFERENCE:
        for tier in tiers:
            if (tier_of(tier) or "").upper() == preferred:
                return tier
    return tiers[0]


def parse_carrier_date(value: Any) -> Optional[date]:
    """Parse the date formats carriers use: ISO dates/datetimes and YYYYMMDD"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%Y%m%d").date()
    except ValueError:
        logger.debug(f"Unrecognised carrier date: {text!r}")
        return None


def days_from_today(days: int) -> date:
    return date.today() + timedelta(days=days)


def weight_in_pounds(request: RateRequest) -> float:
    """Request weight normalized to pounds, rounded to 2 decimals"""
    weight = request.weight
    if request.weight_unit == WeightUnit.KG:
        weight = weight * KG_TO_LB
    return round(weight, 2)


def dimensions_in_inches(dimensions: Optional[Dimensions]) -> Optional[Dict[str, int]]:
    """Box dimensions in whole inches (rounded up), or None"""
    if dimensions is None:
        return None
    factor = CM_TO_IN if dimensions.unit == DimensionUnit.CM else 1.0
    return {
        "length": math.ceil(round(dimensions.length * factor, 4)),
        "width": math.ceil(round(dimensions.width * factor, 4)),
        "height": math.ceil(round(dimensions.height * factor, 4)),
    }


class BaseCarrier(ABC):
    """Base class for all shipping carriers"""

    carrier_name: CarrierName
    carrier_code = "generic"

    def __init__(self, credentials: Optional[CarrierCredentials] = None):
        """Initialize the carrier

        Args:
            credentials: Credentials from the carrier config lookup. Missing or
                placeholder credentials switch the adapter to sample rates.
        """
        self.credentials = credentials

    @property
    def uses_sample_rates(self) -> bool:
        return self.credentials is None or self.credentials.uses_placeholder

    @property
    def timeout(self) -> float:
        return self.credentials.timeout if self.credentials else 30.0

    async def fetch_rates(self, request: RateRequest) -> List[ShippingRate]:
        """Get normalized rates for a request

        Args:
            request: Carrier-agnostic rate request

        Returns:
            List of ShippingRate records

        Raises:
            CarrierError: On any failure, classified as recoverable or not
        """
        try:
            if self.uses_sample_rates:
                logger.warning(
                    f"[{self.carrier_name.value}] No live credentials configured - "
                    f"returning sample rates"
                )
                response = self._sample_response(request)
            else:
                logger.info(f"[{self.carrier_name.value}] Requesting live rates")
                response = await self._call_api(request)

            rates = self._adapt_response(response)
            logger.info(f"[{self.carrier_name.value}] Adapted {len(rates)} rates")
            return rates

        except Exception as e:
            error = classify_carrier_error(self.carrier_name.value, e)
            logger.error(
                f"[{self.carrier_name.value}] Rate request failed "
                f"(recoverable={error.recoverable}): {error.message}"
            )
            raise error from e

    async def track_shipment(self, tracking_number: str) -> Dict[str, Any]:
        """Tracking is not offered by the rate engine"""
        raise NotImplementedError(f"{self.carrier_name.value} tracking not implemented")

    @abstractmethod
    async def _call_api(self, request: RateRequest) -> Dict[str, Any]:
        """Call the live carrier API and return its decoded payload"""
        pass

    @abstractmethod
    def _sample_response(self, request: RateRequest) -> Dict[str, Any]:
        """Deterministic canned payload in the carrier's native shape"""
        pass

    @abstractmethod
    def _adapt_response(self, response: Dict[str, Any]) -> List[ShippingRate]:
        """Map the carrier's native payload to ShippingRate records"""
        pass

    def make_rate_id(self, service_code: str) -> str:
        return f"{self.carrier_code}-{service_code}-{int(time.time() * 1000)}"

    async def _request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: Optional[httpx.Auth] = None,
    ) -> httpx.Response:
        """
        Make a request to the carrier API

        Transport errors propagate as httpx exceptions so they can be
        classified. Non-2xx answers raise a CarrierError that is recoverable
        only when the status text reports a timeout (e.g. 504).
        """
        logger.debug(f"[{self.carrier_name.value}] {method} {url}")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(
                method=method,
                url=url,
                headers=headers,
                json=json,
                data=data,
                params=params,
                auth=auth,
            )

        if response.status_code not in (200, 201):
            logger.error(
                f"[{self.carrier_name.value}] API error {response.status_code}: {response.text[:500]}"
            )
            message = (
                f"{self.carrier_name.value} API error: {response.status_code} "
                f"{response.reason_phrase}"
            )
            raise CarrierError(
                self.carrier_name.value,
                message,
                recoverable=is_transport_failure(message),
            )

        return response

    async def _request_json(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        response = await self._request(method, url, **kwargs)
        return response.json()
