# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from shipquote.core.carrier_config import CarrierConfig, CarrierCredentials
from shipquote.core.config import Settings
from shipquote.core.enums import CarrierName
from shipquote.main import app
from shipquote.routes.rates import get_carrier_config
from shipquote.schemas.rates import Dimensions, RateRequest, ShippingOptions


@pytest.fixture
def settings():
    """Provide test settings (placeholder credentials for every carrier)"""
    return Settings(
        USPS_API_KEY="demo-usps-key",
        FEDEX_API_KEY="demo-fedex-key",
        FEDEX_API_SECRET="demo-fedex-secret",
        UPS_API_KEY="demo-ups-key",
        UPS_API_SECRET="demo-ups-secret",
        CARRIER_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def sample_config(settings):
    """Every carrier configured, all answering with sample rates"""
    return CarrierConfig.from_settings(settings)


@pytest.fixture
def live_credentials():
    """Credentials that are not placeholders, so adapters take the live path"""
    return CarrierCredentials(
        api_key="live-key",
        api_secret="live-secret",
        account_number="123456789",
        endpoint="https://carrier.example.com",
        timeout=5.0,
    )


@pytest.fixture
def live_config(live_credentials):
    return CarrierConfig({carrier: live_credentials for carrier in CarrierName})


@pytest.fixture
def rate_request():
    """A plain domestic parcel"""
    return RateRequest(
        origin_postal_code="10001",
        destination_postal_code="90210",
        weight=5,
        dimensions=Dimensions(length=12, width=8, height=6),
    )


@pytest.fixture
def uk_rate_request():
    return RateRequest(
        origin_postal_code="SW1A 1AA",
        destination_postal_code="M1 1AE",
        weight=2,
    )


@pytest.fixture
def no_options():
    return ShippingOptions()


@pytest.fixture
def test_client(sample_config):
    """Provide a test client quoting from sample rates"""
    app.dependency_overrides[get_carrier_config] = lambda: sample_config
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
