import httpx
import pytest
import xmltodict
from datetime import date, timedelta

from shipquote.core.enums import CarrierName, ServiceSpeed, WeightUnit
from shipquote.core.exceptions import CarrierError
from shipquote.schemas.rates import RateRequest
from shipquote.services.shipping.carriers.usps import USPSCarrier

LIVE_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<RateV4Response>
  <Package ID="0">
    <ZipOrigination>10001</ZipOrigination>
    <ZipDestination>90210</ZipDestination>
    <Postage CLASSID="1">
      <MailService>Priority Mail 2-Day&amp;lt;sup&amp;gt;&amp;#8482;&amp;lt;/sup&amp;gt;</MailService>
      <Rate>31.40</Rate>
    </Postage>
  </Package>
</RateV4Response>
"""

PACKAGE_ERROR_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<RateV4Response>
  <Package ID="0">
    <Error>
      <Number>-2147219498</Number>
      <Description>Please enter a valid ZIP Code for the recipient.</Description>
    </Error>
  </Package>
</RateV4Response>
"""

AUTH_ERROR_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <Number>80040B1A</Number>
  <Description>Authorization failure.</Description>
</Error>
"""


@pytest.mark.asyncio
async def test_usps_sample_rates(rate_request):
    rates = await USPSCarrier().fetch_rates(rate_request)

    by_code = {rate.service_code: rate for rate in rates}
    assert set(by_code) == {"priority", "express", "ground"}

    priority = by_code["priority"]
    assert priority.carrier == CarrierName.USPS
    assert priority.service_name == "Priority Mail"
    assert priority.base_rate == 28.95
    assert priority.total_cost == 28.95
    assert priority.additional_fees == []
    assert priority.speed == ServiceSpeed.TWO_DAY
    assert priority.estimated_delivery_date == date.today() + timedelta(days=2)
    assert priority.features == ["Signature Available"]
    assert priority.id.startswith("usps-priority-")

    express = by_code["express"]
    assert express.guaranteed_delivery is True
    assert express.speed == ServiceSpeed.OVERNIGHT
    assert "Money-Back Guarantee" in express.features

    ground = by_code["ground"]
    assert ground.base_rate == 12.50
    assert ground.guaranteed_delivery is False
    assert ground.estimated_delivery_date == date.today() + timedelta(days=5)


def test_usps_builds_rate_v4_xml(live_credentials):
    request = RateRequest(
        origin_postal_code="10001-1234",
        destination_postal_code="90210",
        weight=2.5,
    )

    xml = USPSCarrier(live_credentials)._build_rate_request(request)
    parsed = xmltodict.parse(xml)["RateV4Request"]

    assert parsed["@USERID"] == "live-key"
    assert parsed["Package"]["ZipOrigination"] == "10001"
    assert parsed["Package"]["Pounds"] == "2"
    assert parsed["Package"]["Ounces"] == "8.0"
    assert parsed["Package"]["Service"] == "ALL"
    assert "Width" not in parsed["Package"]


def test_usps_xml_includes_dimensions(live_credentials, rate_request):
    xml = USPSCarrier(live_credentials)._build_rate_request(rate_request)
    package = xmltodict.parse(xml)["RateV4Request"]["Package"]

    assert package["Length"] == "12"
    assert package["Width"] == "8"
    assert package["Height"] == "6"


@pytest.mark.asyncio
async def test_usps_live_rates(mocker, live_credentials, rate_request):
    mock_request = mocker.patch.object(
        USPSCarrier, "_request", return_value=httpx.Response(200, text=LIVE_RESPONSE)
    )

    rates = await USPSCarrier(live_credentials).fetch_rates(rate_request)

    assert len(rates) == 1
    assert rates[0].service_code == "priority"
    assert rates[0].service_name == "Priority Mail"
    assert rates[0].base_rate == 31.40

    args, kwargs = mock_request.call_args
    assert args == ("GET", "https://carrier.example.com")
    assert kwargs["params"]["API"] == "RateV4"
    assert "<RateV4Request" in kwargs["params"]["XML"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body,message",
    [
        (PACKAGE_ERROR_RESPONSE, "Please enter a valid ZIP Code for the recipient."),
        (AUTH_ERROR_RESPONSE, "Authorization failure."),
    ],
)
async def test_usps_error_documents_are_not_recoverable(mocker, live_credentials, rate_request, body, message):
    mocker.patch.object(USPSCarrier, "_request", return_value=httpx.Response(200, text=body))

    with pytest.raises(CarrierError) as exc_info:
        await USPSCarrier(live_credentials).fetch_rates(rate_request)

    assert exc_info.value.message == message
    assert exc_info.value.recoverable is False


def test_usps_unknown_service_keeps_carrier_name():
    rates = USPSCarrier()._adapt_response(
        {
            "RateV4Response": {
                "Package": {
                    "Postage": {"@CLASSID": "77", "MailService": "Library Mail", "Rate": "4.10"}
                }
            }
        }
    )

    assert len(rates) == 1
    assert rates[0].service_name == "Library Mail"
    assert rates[0].speed == ServiceSpeed.STANDARD
    assert rates[0].estimated_delivery_date == date.today() + timedelta(days=3)


def test_usps_skips_postage_without_rate():
    rates = USPSCarrier()._adapt_response(
        {"RateV4Response": {"Package": {"Postage": [{"@CLASSID": "1", "MailService": "Priority"}]}}}
    )

    assert rates == []


def test_usps_weight_in_kilograms(live_credentials):
    request = RateRequest(
        origin_postal_code="10001",
        destination_postal_code="90210",
        weight=1,
        weight_unit=WeightUnit.KG,
    )

    package = xmltodict.parse(USPSCarrier(live_credentials)._build_rate_request(request))[
        "RateV4Request"
    ]["Package"]

    # 1 kg = 2.20 lb = 2 lb 3.2 oz
    assert package["Pounds"] == "2"
    assert package["Ounces"] == "3.2"
