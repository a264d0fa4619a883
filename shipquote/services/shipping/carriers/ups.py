"""
UPS Carrier Implementation

This module implements the UPS Rating API integration.

Features:
- OAuth 2.0 client-credentials authentication
- Rate shopping across all UPS services for a route
- Negotiated (account) vs published (list) rate selection

UPS API Docs: https://developer.ups.com/
"""

import copy
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from shipquote.core.enums import CarrierName, ServiceSpeed
from shipquote.core.exceptions import CarrierError
from shipquote.schemas.rates import RateRequest, ShippingRate
from shipquote.services.shipping.base import (
    DEFAULT_TRANSIT_DAYS,
    BaseCarrier,
    days_from_today,
    dimensions_in_inches,
    parse_carrier_date,
    select_preferred_tier,
    weight_in_pounds,
)
from shipquote.services.shipping.data import ups_sample_rated_shipments

logger = logging.getLogger(__name__)

UPS_API_VERSION = "v2403"

UPS_SERVICE_MAP = {
    "01": {"code": "ups_next_day_air", "name": "UPS Next Day Air"},
    "02": {"code": "ups_2nd_day_air", "name": "UPS 2nd Day Air"},
    "03": {"code": "ups_ground", "name": "UPS Ground"},
    "12": {"code": "ups_3_day_select", "name": "UPS 3 Day Select"},
    "13": {"code": "ups_next_day_air_saver", "name": "UPS Next Day Air Saver"},
    "14": {"code": "ups_overnight", "name": "UPS Next Day Air Early"},
}

UPS_SPEED_MAP = {
    "01": ServiceSpeed.OVERNIGHT,
    "02": ServiceSpeed.TWO_DAY,
    "03": ServiceSpeed.ECONOMY,
    "12": ServiceSpeed.STANDARD,
    "13": ServiceSpeed.OVERNIGHT,
    "14": ServiceSpeed.OVERNIGHT,
}

UPS_TRANSIT_DAYS = {
    "01": 1,
    "02": 2,
    "03": 5,
    "12": 3,
    "13": 1,
    "14": 1,
}

GUARANTEED_SERVICES = {"01", "14"}


class UPSCarrier(BaseCarrier):
    """UPS carrier implementation"""

    carrier_name = CarrierName.UPS
    carrier_code = "ups"

    async def _get_auth_token(self) -> str:
        """Exchange client id/secret for an OAuth access token (HTTP basic auth)"""
        result = await self._request_json(
            "POST",
            f"{self.credentials.endpoint.rstrip('/')}/security/v1/oauth/token",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={"grant_type": "client_credentials"},
            auth=httpx.BasicAuth(self.credentials.api_key, self.credentials.api_secret or ""),
        )

        token = result.get("access_token")
        if not token:
            raise CarrierError(
                self.carrier_name.value,
                "UPS authentication failed: no access token returned",
                recoverable=False,
            )
        return token

    def _build_payload(self, request: RateRequest) -> Dict[str, Any]:
        package: Dict[str, Any] = {
            "PackagingType": {"Code": "02"},
            "PackageWeight": {
                "UnitOfMeasurement": {"Code": "LBS"},
                "Weight": str(weight_in_pounds(request)),
            },
        }

        dims = dimensions_in_inches(request.dimensions)
        if dims:
            package["Dimensions"] = {
                "UnitOfMeasurement": {"Code": "IN"},
                "Length": str(dims["length"]),
                "Width": str(dims["width"]),
                "Height": str(dims["height"]),
            }

        shipment: Dict[str, Any] = {
            "Shipper": {
                "ShipperNumber": self.credentials.account_number or "",
                "Address": {"PostalCode": request.origin_postal_code.strip(), "CountryCode": "US"},
            },
            "ShipFrom": {
                "Address": {"PostalCode": request.origin_postal_code.strip(), "CountryCode": "US"}
            },
            "ShipTo": {
                "Address": {
                    "PostalCode": request.destination_postal_code.strip(),
                    "CountryCode": "US",
                }
            },
            "Package": package,
            "DeliveryTimeInformation": {"PackageBillType": "03"},
        }

        if self.credentials.account_number:
            shipment["ShipmentRatingOptions"] = {"NegotiatedRatesIndicator": ""}

        return {"RateRequest": {"Request": {"RequestOption": "Shoptimeintransit"}, "Shipment": shipment}}

    async def _call_api(self, request: RateRequest) -> Dict[str, Any]:
        token = await self._get_auth_token()
        return await self._request_json(
            "POST",
            f"{self.credentials.endpoint.rstrip('/')}/api/rating/{UPS_API_VERSION}/Shop",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
                "transactionSrc": "shipquote",
            },
            json=self._build_payload(request),
        )

    def _sample_response(self, request: RateRequest) -> Dict[str, Any]:
        return {"RateResponse": {"RatedShipment": copy.deepcopy(ups_sample_rated_shipments)}}

    def _adapt_response(self, response: Dict[str, Any]) -> List[ShippingRate]:
        errors = response.get("errors") or (response.get("response") or {}).get("errors") or []
        if errors:
            raise CarrierError(
                self.carrier_name.value,
                errors[0].get("message", "UPS request rejected"),
                recoverable=False,
            )

        shipments = (response.get("RateResponse") or {}).get("RatedShipment") or []
        if not isinstance(shipments, list):
            shipments = [shipments]

        rates = []
        for shipment in shipments:
            service = shipment.get("Service") or {}
            if not service.get("Code"):
                continue
            rates.append(self._adapt_rate(shipment))
        return rates

    def _extract_base_rate(self, shipment: Dict[str, Any]) -> float:
        tiers = []
        negotiated = ((shipment.get("NegotiatedRateCharges") or {}).get("TotalCharge") or {}).get(
            "MonetaryValue"
        )
        if negotiated:
            tiers.append(("ACCOUNT", negotiated))
        published = (shipment.get("TotalCharges") or {}).get("MonetaryValue")
        if published:
            tiers.append(("LIST", published))

        selected = select_preferred_tier(tiers, lambda tier: tier[0])
        if selected is None:
            return 0.0
        return float(selected[1])

    def _transit_days(self, shipment: Dict[str, Any]) -> Optional[int]:
        days = (shipment.get("GuaranteedDelivery") or {}).get("BusinessDaysInTransit")
        if days and str(days).isdigit():
            return int(days)
        return None

    def _parse_delivery_date(self, shipment: Dict[str, Any], service_code: str) -> date:
        summary = (shipment.get("TimeInTransit") or {}).get("ServiceSummary") or {}
        estimated = summary.get("EstimatedArrival") or {}
        arrival = (estimated.get("Arrival") or {}).get("Date")
        delivery_info = (shipment.get("DeliveryTimeInformation") or {}).get("DeliveryDate")

        parsed = parse_carrier_date(arrival) or parse_carrier_date(delivery_info)
        if parsed:
            return parsed

        days = self._transit_days(shipment)
        if days is None:
            days = UPS_TRANSIT_DAYS.get(service_code, DEFAULT_TRANSIT_DAYS)
        return days_from_today(days)

    def _extract_features(self, shipment: Dict[str, Any], service_code: str) -> List[str]:
        features = []

        if service_code in GUARANTEED_SERVICES:
            features.append("Guaranteed Delivery")

        if service_code == "02":
            features.append("Standard Delivery")

        if service_code == "03":
            features.append("Ground Service")

        days = self._transit_days(shipment)
        if days is not None:
            features.append(f"{days} Business Day" if days == 1 else f"{days} Business Days")

        features.append("Signature Available")

        return features

    def _adapt_rate(self, shipment: Dict[str, Any]) -> ShippingRate:
        service = shipment["Service"]
        code = service["Code"]
        service_info = UPS_SERVICE_MAP.get(code) or {
            "code": code.lower(),
            "name": service.get("Description") or f"UPS {code}",
        }
        base_rate = self._extract_base_rate(shipment)

        return ShippingRate(
            id=self.make_rate_id(service_info["code"]),
            carrier=self.carrier_name,
            service_code=service_info["code"],
            service_name=service_info["name"],
            speed=UPS_SPEED_MAP.get(code, ServiceSpeed.STANDARD),
            features=self._extract_features(shipment, code),
            base_rate=base_rate,
            additional_fees=[],
            total_cost=base_rate,
            estimated_delivery_date=self._parse_delivery_date(shipment, code),
            guaranteed_delivery=code in GUARANTEED_SERVICES,
        )
