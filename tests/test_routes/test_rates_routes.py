# tests/test_routes/test_rates_routes.py
from datetime import date

import pytest

from shipquote.core.carrier_config import CarrierConfig
from shipquote.core.enums import CarrierName
from shipquote.main import app
from shipquote.routes.rates import get_carrier_config


def _body(**request_overrides):
    request = {
        "origin_postal_code": "10001",
        "destination_postal_code": "90210",
        "weight": 5,
        "dimensions": {"length": 12, "width": 8, "height": 6},
    }
    request.update(request_overrides)
    return {"request": request}


def test_health_check(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_carriers(test_client):
    response = test_client.get("/api/carriers")

    assert response.status_code == 200
    assert response.json() == ["USPS", "FedEx", "UPS"]


def test_quote_all_carriers(test_client):
    response = test_client.post("/api/rates", json=_body())

    assert response.status_code == 200
    data = response.json()
    assert data["request_id"].startswith("rate-")
    assert data["errors"] == []
    assert {rate["carrier"] for rate in data["rates"]} == {"USPS", "FedEx", "UPS"}

    totals = [rate["total_cost"] for rate in data["rates"]]
    assert totals == sorted(totals)
    for rate in data["rates"]:
        date.fromisoformat(rate["estimated_delivery_date"])


def test_quote_with_options(test_client):
    body = _body(carriers=["USPS"])
    body["options"] = {"signature_required": True, "declared_value": 500}

    response = test_client.post("/api/rates", json=body)

    assert response.status_code == 200
    rates = response.json()["rates"]
    assert {rate["carrier"] for rate in rates} == {"USPS"}
    priority = next(rate for rate in rates if rate["service_code"] == "priority")
    assert [fee["type"] for fee in priority["additional_fees"]] == ["insurance", "signature"]
    assert priority["total_cost"] == pytest.approx(28.95 + 5.00 + 5.50)


def test_quote_rejects_invalid_weight(test_client):
    response = test_client.post("/api/rates", json=_body(weight=0))

    assert response.status_code == 422


def test_quote_rejects_unknown_carrier(test_client):
    response = test_client.post("/api/rates", json=_body(carriers=["DHL"]))

    assert response.status_code == 422


def test_quote_without_configured_carriers(test_client):
    app.dependency_overrides[get_carrier_config] = lambda: CarrierConfig({})

    response = test_client.post("/api/rates", json=_body())

    assert response.status_code == 503
    assert "No shipping carriers" in response.json()["detail"]


def test_quote_for_unconfigured_carrier_is_empty(test_client, live_credentials):
    app.dependency_overrides[get_carrier_config] = lambda: CarrierConfig(
        {CarrierName.USPS: live_credentials}
    )

    response = test_client.post("/api/rates", json=_body(carriers=["FedEx"]))

    assert response.status_code == 200
    assert response.json()["rates"] == []
    assert response.json()["errors"] == []
