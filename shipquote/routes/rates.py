import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from shipquote.core.carrier_config import CarrierConfig
from shipquote.core.config import get_settings
from shipquote.core.exceptions import NoCarriersConfiguredError
from shipquote.schemas.rates import RateQuoteBody, RateResponse
from shipquote.services.shipping.rate_service import RateService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["rates"],
    responses={404: {"description": "Not found"}},
)


def get_carrier_config() -> CarrierConfig:
    return CarrierConfig.from_settings(get_settings())


def get_rate_service(config: CarrierConfig = Depends(get_carrier_config)) -> RateService:
    return RateService(config)


@router.post("/rates", response_model=RateResponse)
async def fetch_rates(
    body: RateQuoteBody,
    rate_service: RateService = Depends(get_rate_service),
):
    """Quote a package across all configured carriers."""
    logger.info(
        f"POST /api/rates {body.request.origin_postal_code} -> "
        f"{body.request.destination_postal_code}, weight={body.request.weight}"
    )

    try:
        return await rate_service.fetch_all_rates(body.request, body.options)
    except NoCarriersConfiguredError as e:
        logger.warning(f"No carriers to quote: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/carriers", response_model=List[str])
async def list_carriers(config: CarrierConfig = Depends(get_carrier_config)):
    """Carriers currently configured for quoting."""
    return [carrier.value for carrier in config.configured_carriers()]
