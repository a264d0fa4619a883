"""
FedEx Carrier Implementation

This module implements the FedEx REST Rate Quote API integration.

Features:
- OAuth 2.0 client-credentials authentication
- Rate calculation for US, UK domestic and international routes
- Account (negotiated) vs list rate selection
- Carrier surcharges itemized as fees

FedEx API Docs: https://developer.fedex.com/api/en-us/catalog/rate/v1/docs.html
"""

import copy
import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from shipquote.core.enums import CarrierName, FeeType, ServiceSpeed
from shipquote.core.exceptions import CarrierError
from shipquote.schemas.rates import Address, Fee, RateRequest, ShippingRate
from shipquote.services.shipping.base import (
    DEFAULT_TRANSIT_DAYS,
    BaseCarrier,
    days_from_today,
    dimensions_in_inches,
    parse_carrier_date,
    select_preferred_tier,
    weight_in_pounds,
)
from shipquote.services.shipping.data import (
    fedex_sample_rate_details,
    fedex_sample_uk_rate_details,
)
from shipquote.services.shipping.fees import fee_total

logger = logging.getLogger(__name__)

FEDEX_SPEED_MAP = {
    "INTERNATIONAL_FIRST": ServiceSpeed.OVERNIGHT,
    "PRIORITY_OVERNIGHT": ServiceSpeed.OVERNIGHT,
    "FIRST_OVERNIGHT": ServiceSpeed.OVERNIGHT,
    "STANDARD_OVERNIGHT": ServiceSpeed.OVERNIGHT,
    "FEDEX_UK_PRIORITY": ServiceSpeed.OVERNIGHT,
    "INTERNATIONAL_PRIORITY": ServiceSpeed.TWO_DAY,
    "FEDEX_2_DAY": ServiceSpeed.TWO_DAY,
    "FEDEX_2_DAY_AM": ServiceSpeed.TWO_DAY,
    "FEDEX_UK_STANDARD": ServiceSpeed.TWO_DAY,
    "INTERNATIONAL_ECONOMY": ServiceSpeed.STANDARD,
    "FEDEX_EXPRESS_SAVER": ServiceSpeed.STANDARD,
    "FEDEX_GROUND": ServiceSpeed.ECONOMY,
    "GROUND_HOME_DELIVERY": ServiceSpeed.ECONOMY,
    "FEDEX_UK_ECONOMY": ServiceSpeed.ECONOMY,
}

FEDEX_TRANSIT_DAYS = {
    "ONE_DAY": 1,
    "TWO_DAYS": 2,
    "THREE_DAYS": 3,
    "FOUR_DAYS": 4,
    "FIVE_DAYS": 5,
    "SIX_DAYS": 6,
    "SEVEN_DAYS": 7,
}

FEDEX_SURCHARGE_TYPES = {
    "FUEL": FeeType.FUEL,
    "RESIDENTIAL_DELIVERY": FeeType.OTHER,
    "SIGNATURE_OPTION": FeeType.SIGNATURE,
    "DECLARED_VALUE": FeeType.INSURANCE,
    "SATURDAY_DELIVERY": FeeType.SATURDAY_DELIVERY,
}

UK_REGION_CODES = {
    "England": "EN",
    "Scotland": "SC",
    "Wales": "WA",
    "Northern Ireland": "NI",
}

US_ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")
UK_POSTCODE_PATTERN = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}$", re.IGNORECASE)


def detect_country_from_postal_code(postal_code: str) -> str:
    """Guess the ISO country code from a postal code's format (US ZIP or UK postcode)"""
    trimmed = postal_code.strip()

    if US_ZIP_PATTERN.match(trimmed):
        return "US"

    if UK_POSTCODE_PATTERN.match(trimmed):
        return "GB"

    return "US"


def convert_state_to_fedex_code(state: str, country_code: str) -> str:
    """
    FedEx requires exactly two characters for stateOrProvinceCode.

    US states are usually already two letters; UK region names are mapped
    to EN/SC/WA/NI (unknown UK regions default to EN).
    """
    if not state:
        return ""

    trimmed = state.strip()

    if len(trimmed) == 2:
        return trimmed.upper()

    if country_code == "GB":
        return UK_REGION_CODES.get(trimmed, "EN")

    return trimmed[:2].upper()


def format_transit_time(transit_time: str) -> str:
    days = FEDEX_TRANSIT_DAYS.get(transit_time)
    if days is None:
        return transit_time
    return f"{days} Day" if days == 1 else f"{days} Days"


class FedExCarrier(BaseCarrier):
    """FedEx carrier implementation."""

    carrier_name = CarrierName.FEDEX
    carrier_code = "fedex"

    async def _get_auth_token(self) -> str:
        """Exchange the API key/secret for an OAuth access token"""
        auth_url = f"{self.credentials.endpoint.rstrip('/')}/oauth/token"

        result = await self._request_json(
            "POST",
            auth_url,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={
                "grant_type": "client_credentials",
                "client_id": self.credentials.api_key,
                "client_secret": self.credentials.api_secret or "",
            },
        )

        token = result.get("access_token")
        if not token:
            raise CarrierError(
                self.carrier_name.value,
                "FedEx authentication failed: no access token returned",
                recoverable=False,
            )

        logger.debug("[FedEx] Authentication successful")
        return token

    def _address_block(self, postal_code: str, address: Optional[Address]) -> Dict[str, Any]:
        postal_code = postal_code.strip()
        country = detect_country_from_postal_code(postal_code)
        return {
            "address": {
                "streetLines": [address.street1 if address else ""],
                "city": address.city if address else "",
                "stateOrProvinceCode": convert_state_to_fedex_code(
                    address.state if address else "", country
                ),
                "postalCode": postal_code,
                "countryCode": country,
            }
        }

    def _build_payload(self, request: RateRequest) -> Dict[str, Any]:
        line_item: Dict[str, Any] = {
            "weight": {"units": "LB", "value": weight_in_pounds(request)},
            "groupPackageCount": 1,
        }

        dims = dimensions_in_inches(request.dimensions)
        if dims:
            line_item["dimensions"] = {**dims, "units": "IN"}

        if request.declared_value:
            line_item["declaredValue"] = {"amount": request.declared_value, "currency": "USD"}

        return {
            "accountNumber": {
                "value": self.credentials.account_number or self.credentials.api_key
            },
            "requestedShipment": {
                "shipper": self._address_block(request.origin_postal_code, request.origin_address),
                "recipient": self._address_block(
                    request.destination_postal_code, request.destination_address
                ),
                "pickupType": "DROPOFF_AT_FEDEX_LOCATION",
                "shipDateStamp": date.today().isoformat(),
                # No serviceType: FedEx returns every service valid for the route
                "packagingType": "YOUR_PACKAGING",
                "rateRequestType": ["ACCOUNT", "LIST"],
                "requestedPackageLineItems": [line_item],
            },
        }

    async def _call_api(self, request: RateRequest) -> Dict[str, Any]:
        token = await self._get_auth_token()
        payload = self._build_payload(request)

        shipment = payload["requestedShipment"]
        logger.info(
            f"[FedEx] Route {shipment['shipper']['address']['countryCode']} -> "
            f"{shipment['recipient']['address']['countryCode']}, "
            f"{weight_in_pounds(request)} lbs"
        )

        return await self._request_json(
            "POST",
            f"{self.credentials.endpoint.rstrip('/')}/rate/v1/rates/quotes",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
                "X-locale": "en_US",
            },
            json=payload,
        )

    def _sample_response(self, request: RateRequest) -> Dict[str, Any]:
        origin = detect_country_from_postal_code(request.origin_postal_code)
        destination = detect_country_from_postal_code(request.destination_postal_code)

        if origin == "GB" and destination == "GB":
            details = fedex_sample_uk_rate_details
        else:
            details = fedex_sample_rate_details

        return {"output": {"rateReplyDetails": copy.deepcopy(details)}}

    def _adapt_response(self, response: Dict[str, Any]) -> List[ShippingRate]:
        output = response.get("output") or {}

        if output.get("alerts"):
            self._handle_alerts(output["alerts"])

        return [self._adapt_rate(detail) for detail in output.get("rateReplyDetails") or []]

    def _handle_alerts(self, alerts: List[Dict[str, Any]]) -> None:
        """ERROR alerts fail the whole call; WARNING alerts are only logged"""
        errors = [alert for alert in alerts if alert.get("alertType") == "ERROR"]
        if errors:
            raise CarrierError(
                self.carrier_name.value,
                errors[0].get("message", "FedEx returned an error alert"),
                recoverable=False,
            )

        for alert in alerts:
            if alert.get("alertType") == "WARNING":
                logger.warning(f"[FedEx] {alert.get('code', '')}: {alert.get('message', '')}")

    def _map_surcharge(self, surcharge: Dict[str, Any]) -> Fee:
        return Fee(
            type=FEDEX_SURCHARGE_TYPES.get(surcharge.get("type", ""), FeeType.OTHER),
            amount=surcharge.get("amount", 0),
            description=surcharge.get("description") or surcharge.get("type", "Surcharge"),
        )

    def _extract_features(self, detail: Dict[str, Any]) -> List[str]:
        features = []
        operational = detail.get("operationalDetail") or {}

        signature_option = detail.get("signatureOptionType")
        if signature_option and signature_option != "SERVICE_DEFAULT":
            features.append("Signature Required")

        if operational.get("deliveryDay"):
            features.append(f"Delivers {operational['deliveryDay']}")

        if operational.get("transitTime"):
            features.append(format_transit_time(operational["transitTime"]))

        if not operational.get("ineligibleForMoneyBackGuarantee"):
            features.append("Money-Back Guarantee")

        return features

    def _parse_delivery_date(self, detail: Dict[str, Any]) -> date:
        operational = detail.get("operationalDetail") or {}

        commit_date = ((detail.get("commit") or {}).get("dateDetail") or {}).get("dayCxsFormat")
        parsed = parse_carrier_date(commit_date) or parse_carrier_date(operational.get("commitDate"))
        if parsed:
            return parsed

        days = FEDEX_TRANSIT_DAYS.get(operational.get("transitTime") or "", DEFAULT_TRANSIT_DAYS)
        return days_from_today(days)

    def _adapt_rate(self, detail: Dict[str, Any]) -> ShippingRate:
        rated = select_preferred_tier(
            detail.get("ratedShipmentDetails") or [], lambda d: d.get("rateType")
        )
        if rated is None:
            raise CarrierError(
                self.carrier_name.value,
                f"FedEx returned no rate for {detail.get('serviceType')}",
                recoverable=False,
            )

        surcharges = (rated.get("shipmentRateDetail") or {}).get("surCharges") or []
        fees = [self._map_surcharge(s) for s in surcharges]
        base_rate = float(rated.get("totalBaseCharge", 0))
        total_cost = fee_total(base_rate, fees)

        net_charge = rated.get("totalNetCharge")
        if net_charge is not None and abs(float(net_charge) - total_cost) > 0.005:
            logger.debug(
                f"[FedEx] {detail.get('serviceType')}: net charge {net_charge} differs from "
                f"base + surcharges {total_cost:.2f} (discounts not itemized)"
            )

        service_type = detail.get("serviceType", "")
        operational = detail.get("operationalDetail") or {}

        return ShippingRate(
            id=self.make_rate_id(service_type),
            carrier=self.carrier_name,
            service_code=(detail.get("serviceDescription") or {}).get("code", service_type),
            service_name=detail.get("serviceName") or service_type,
            speed=FEDEX_SPEED_MAP.get(service_type, ServiceSpeed.STANDARD),
            features=self._extract_features(detail),
            base_rate=base_rate,
            additional_fees=fees,
            total_cost=total_cost,
            estimated_delivery_date=self._parse_delivery_date(detail),
            guaranteed_delivery=not operational.get("ineligibleForMoneyBackGuarantee", False),
        )
