# shipquote/core/config.py

import os
from functools import lru_cache
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # USPS Web Tools
    USPS_API_KEY: str = "demo-usps-key"
    USPS_ENDPOINT: str = "https://secure.shippingapis.com/ShippingAPI.dll"
    USPS_ENABLED: bool = True

    # FedEx REST API (OAuth client credentials)
    FEDEX_API_KEY: str = "demo-fedex-key"
    FEDEX_API_SECRET: str = "demo-fedex-secret"
    FEDEX_ACCOUNT_NUMBER: str = ""
    FEDEX_API_BASE_URL: str = "https://apis.fedex.com"
    FEDEX_ENABLED: bool = True

    # UPS Rating API (OAuth client credentials)
    UPS_API_KEY: str = "demo-ups-key"
    UPS_API_SECRET: str = "demo-ups-secret"
    UPS_ACCOUNT_NUMBER: str = ""
    UPS_ENDPOINT: str = "https://onlinetools.ups.com"
    UPS_ENABLED: bool = True

    # Transport timeout applied by every carrier adapter (seconds)
    CARRIER_TIMEOUT_SECONDS: float = 30.0

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists(os.environ.get('ENV_FILE', '.env')) else None,
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()


def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
