# shipquote/main.py

from fastapi import FastAPI

from shipquote.core.config import get_settings
from shipquote.core.logging_config import configure_logging
from shipquote.routes import health, rates

configure_logging()

settings = get_settings()

app = FastAPI(
    title="Shipping Rate Engine",
    description="Multi-carrier shipping rate aggregation",
    debug=settings.DEBUG,
)

app.include_router(rates.router)
app.include_router(health.router)
