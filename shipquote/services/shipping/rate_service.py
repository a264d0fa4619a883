"""
Rate Service - Multi-carrier orchestration

This module provides the main entry point for quoting a shipment across
carriers, abstracting away the specific carrier implementations.

Core Capabilities:
- Fan a request out to every applicable carrier concurrently
- Retry transient carrier failures with exponential backoff
- Apply requested option fees to every returned rate
- Merge and order the rates, collecting one error per failed carrier

Usage:
    rate_service = RateService(CarrierConfig.from_settings(get_settings()))
    response = await rate_service.fetch_all_rates(request, options)
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from shipquote.core.carrier_config import CarrierConfig
from shipquote.core.enums import CarrierName
from shipquote.core.exceptions import CarrierError, NoCarriersConfiguredError
from shipquote.schemas.rates import (
    CarrierErrorDetail,
    RateRequest,
    RateResponse,
    ShippingOptions,
    ShippingRate,
)
from shipquote.services.shipping.base import classify_carrier_error
from shipquote.services.shipping.factory import CarrierRegistry
from shipquote.services.shipping.fees import decorate_rate

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BACKOFF_BASE_SECONDS = 2


def generate_request_id() -> str:
    return f"rate-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def sort_rates(rates: List[ShippingRate]) -> List[ShippingRate]:
    """Cheapest first; equal totals ordered by earliest delivery"""
    return sorted(rates, key=lambda rate: (rate.total_cost, rate.estimated_delivery_date))


@dataclass
class CarrierOutcome:
    """Settled result of one carrier's fetch (including its retries)"""
    carrier: CarrierName
    rates: List[ShippingRate] = field(default_factory=list)
    error: Optional[CarrierErrorDetail] = None
    attempts: int = 0


class RateService:
    """Orchestrates parallel rate fetching from multiple carriers"""

    def __init__(
        self,
        config: CarrierConfig,
        registry: Optional[CarrierRegistry] = None,
        max_retries: int = MAX_RETRIES,
    ):
        """
        Args:
            config: Read-only carrier configuration lookup
            registry: Adapter registry; built from ``config`` when omitted
            max_retries: Retries allowed after the first attempt for
                recoverable failures
        """
        self.config = config
        self.registry = registry or CarrierRegistry(config)
        self.max_retries = max_retries

    def resolve_carriers(self, request: RateRequest) -> List[CarrierName]:
        """
        Requested carriers that are configured, or every configured carrier
        when the request names none. An explicit empty list selects no
        carriers. Unconfigured carriers are skipped silently.
        """
        configured = self.config.configured_carriers()

        if request.carriers is None:
            return configured

        carriers = []
        for carrier in request.carriers:
            if carrier not in configured:
                logger.debug(f"Skipping {carrier.value}: not configured")
                continue
            if carrier not in carriers:
                carriers.append(carrier)
        return carriers

    async def fetch_all_rates(self, request: RateRequest, options: ShippingOptions) -> RateResponse:
        """
        Fetch rates from all applicable carriers in parallel

        Args:
            request: Validated rate request
            options: Requested speed and fee options

        Returns:
            RateResponse with merged, sorted rates and one error per failed carrier

        Raises:
            NoCarriersConfiguredError: When no carrier is configured at all
        """
        request_id = generate_request_id()

        if not self.config.configured_carriers():
            raise NoCarriersConfiguredError("No shipping carriers are configured")

        carriers = self.resolve_carriers(request)
        if not carriers:
            logger.info(f"[{request_id}] None of the requested carriers are configured")
            return RateResponse(
                request_id=request_id,
                rates=[],
                errors=[],
                timestamp=datetime.now(timezone.utc),
            )

        logger.info(f"[{request_id}] Fetching rates from {[c.value for c in carriers]}")

        outcomes = await asyncio.gather(
            *(self._fetch_carrier_rates(carrier, request, options) for carrier in carriers)
        )

        rates: List[ShippingRate] = []
        errors: List[CarrierErrorDetail] = []
        for outcome in outcomes:
            rates.extend(outcome.rates)
            if outcome.error is not None:
                errors.append(outcome.error)

        logger.info(
            f"[{request_id}] Returning {len(rates)} rates with {len(errors)} carrier errors"
        )

        return RateResponse(
            request_id=request_id,
            rates=sort_rates(rates),
            errors=errors,
            timestamp=datetime.now(timezone.utc),
        )

    async def _fetch_carrier_rates(
        self,
        carrier: CarrierName,
        request: RateRequest,
        options: ShippingOptions,
    ) -> CarrierOutcome:
        """Fetch one carrier's rates with retry; never raises"""
        outcome = CarrierOutcome(carrier=carrier)
        attempt = 0

        while True:
            outcome.attempts += 1
            try:
                adapter = self.registry.get(carrier)
                rates = await adapter.fetch_rates(request)
            except Exception as e:
                error = e if isinstance(e, CarrierError) else classify_carrier_error(carrier.value, e)

                if not error.recoverable:
                    logger.error(f"{carrier.value} failed (not recoverable): {error.message}")
                    outcome.error = self._error_detail(carrier, error.message, recoverable=False)
                    return outcome

                if attempt >= self.max_retries:
                    logger.error(
                        f"{carrier.value} failed after {self.max_retries} retries: {error.message}"
                    )
                    outcome.error = self._error_detail(
                        carrier,
                        f"Failed to fetch rates from {carrier.value} after {self.max_retries} retries: {error.message}",
                        recoverable=True,
                    )
                    return outcome

                delay = BACKOFF_BASE_SECONDS ** attempt
                attempt += 1
                logger.warning(
                    f"{carrier.value} failed ({error.message}); retry {attempt}/{self.max_retries} in {delay}s"
                )
                await asyncio.sleep(delay)
                continue

            declared_value = (
                options.declared_value if options.declared_value is not None else request.declared_value
            )
            outcome.rates = [decorate_rate(rate, options, declared_value) for rate in rates]
            logger.info(f"{carrier.value} returned {len(rates)} rates")
            return outcome

    @staticmethod
    def _error_detail(carrier: CarrierName, message: str, recoverable: bool) -> CarrierErrorDetail:
        return CarrierErrorDetail(carrier=carrier, message=message, recoverable=recoverable)
