"""
USPS Carrier Implementation

This module implements the USPS Web Tools RateV4 integration.

Features:
- Rate calculation (domestic RateV4, XML over HTTP GET)

USPS API Docs: https://www.usps.com/business/web-tools-apis/
"""

import copy
import logging
from typing import Any, Dict, List

import xmltodict

from shipquote.core.enums import CarrierName, ServiceSpeed
from shipquote.core.exceptions import CarrierError
from shipquote.schemas.rates import RateRequest, ShippingRate
from shipquote.services.shipping.base import (
    DEFAULT_TRANSIT_DAYS,
    BaseCarrier,
    days_from_today,
    dimensions_in_inches,
    weight_in_pounds,
)
from shipquote.services.shipping.data import usps_sample_postage

logger = logging.getLogger(__name__)

USPS_SERVICE_MAP = {
    "PRIORITY_MAIL": {"code": "priority", "name": "Priority Mail"},
    "PRIORITY_MAIL_EXPRESS": {"code": "express", "name": "Priority Mail Express"},
    "GROUND_ADVANTAGE": {"code": "ground", "name": "Ground Advantage"},
    "MEDIA_MAIL": {"code": "media", "name": "Media Mail"},
}

USPS_SPEED_MAP = {
    "PRIORITY_MAIL": ServiceSpeed.TWO_DAY,
    "PRIORITY_MAIL_EXPRESS": ServiceSpeed.OVERNIGHT,
    "GROUND_ADVANTAGE": ServiceSpeed.ECONOMY,
    "MEDIA_MAIL": ServiceSpeed.ECONOMY,
}

USPS_TRANSIT_DAYS = {
    "PRIORITY_MAIL_EXPRESS": 1,
    "PRIORITY_MAIL": 2,
    "GROUND_ADVANTAGE": 5,
    "MEDIA_MAIL": 7,
}

# Live MailService strings carry HTML markup; CLASSID is stable
USPS_CLASS_IDS = {
    "1": "PRIORITY_MAIL",
    "3": "PRIORITY_MAIL_EXPRESS",
    "1058": "GROUND_ADVANTAGE",
    "6": "MEDIA_MAIL",
}


class USPSCarrier(BaseCarrier):
    """USPS carrier implementation"""

    carrier_name = CarrierName.USPS
    carrier_code = "usps"

    def _build_rate_request(self, request: RateRequest) -> str:
        """Build the RateV4 XML document for a request"""
        pounds_total = weight_in_pounds(request)
        pounds = int(pounds_total)
        ounces = round((pounds_total - pounds) * 16, 1)

        package: Dict[str, Any] = {
            "@ID": "0",
            "Service": "ALL",
            "ZipOrigination": request.origin_postal_code.strip()[:5],
            "ZipDestination": request.destination_postal_code.strip()[:5],
            "Pounds": str(pounds),
            "Ounces": str(ounces),
            "Container": None,
            "Machinable": "TRUE",
        }

        dims = dimensions_in_inches(request.dimensions)
        if dims:
            package["Width"] = str(dims["width"])
            package["Length"] = str(dims["length"])
            package["Height"] = str(dims["height"])

        document = {
            "RateV4Request": {
                "@USERID": self.credentials.api_key,
                "Revision": "2",
                "Package": package,
            }
        }
        return xmltodict.unparse(document, full_document=False)

    async def _call_api(self, request: RateRequest) -> Dict[str, Any]:
        xml_request = self._build_rate_request(request)
        response = await self._request(
            "GET",
            self.credentials.endpoint,
            params={"API": "RateV4", "XML": xml_request},
        )
        return xmltodict.parse(response.text, force_list=("Postage",))

    def _sample_response(self, request: RateRequest) -> Dict[str, Any]:
        return {
            "RateV4Response": {
                "Package": {"@ID": "0", "Postage": copy.deepcopy(usps_sample_postage)}
            }
        }

    def _adapt_response(self, response: Dict[str, Any]) -> List[ShippingRate]:
        # Authentication failures come back as a bare <Error> document
        if "Error" in response:
            raise CarrierError(
                self.carrier_name.value,
                response["Error"].get("Description", "USPS request rejected"),
                recoverable=False,
            )

        package = (response.get("RateV4Response") or {}).get("Package") or {}
        if package.get("Error"):
            raise CarrierError(
                self.carrier_name.value,
                package["Error"].get("Description", "USPS package rejected"),
                recoverable=False,
            )

        postage = package.get("Postage") or []
        if not isinstance(postage, list):
            postage = [postage]

        return [
            self._transform_postage(item)
            for item in postage
            if item.get("MailService") and item.get("Rate")
        ]

    def _service_key(self, postage: Dict[str, Any]) -> str:
        class_id = postage.get("@CLASSID")
        if class_id in USPS_CLASS_IDS:
            return USPS_CLASS_IDS[class_id]
        return postage["MailService"]

    def _transform_postage(self, postage: Dict[str, Any]) -> ShippingRate:
        service_key = self._service_key(postage)
        service_info = USPS_SERVICE_MAP.get(service_key) or {
            "code": service_key.lower(),
            "name": postage["MailService"],
        }
        base_rate = float(postage["Rate"])

        return ShippingRate(
            id=self.make_rate_id(service_info["code"]),
            carrier=self.carrier_name,
            service_code=service_info["code"],
            service_name=service_info["name"],
            speed=USPS_SPEED_MAP.get(service_key, ServiceSpeed.STANDARD),
            features=self._extract_features(service_key),
            base_rate=base_rate,
            additional_fees=[],
            total_cost=base_rate,
            estimated_delivery_date=days_from_today(
                USPS_TRANSIT_DAYS.get(service_key, DEFAULT_TRANSIT_DAYS)
            ),
            guaranteed_delivery=service_key == "PRIORITY_MAIL_EXPRESS",
        )

    def _extract_features(self, service_key: str) -> List[str]:
        features = []

        if service_key == "PRIORITY_MAIL_EXPRESS":
            features.append("Guaranteed Delivery")
            features.append("Money-Back Guarantee")

        if service_key == "PRIORITY_MAIL":
            features.append("Signature Available")

        return features
