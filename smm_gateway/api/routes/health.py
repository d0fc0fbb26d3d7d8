from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import List, Optional

from smm_gateway import __version__
from smm_gateway.adapters.registry import PaymentAdapterRegistry
from smm_gateway.api.dependencies import get_currency_service, get_payment_registry
from smm_gateway.core.logging import get_logger
from smm_gateway.services.currency_service import CurrencyService

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str = __version__
    service: str = "SMM Gateway"


class PaymentAdapterStatus(BaseModel):
    """A configured payment rail and what it can do."""
    name: str
    capabilities: List[str]


class ExchangeRateStatus(BaseModel):
    """State of the exchange rate cache; nothing is fetched to build it."""
    base: str
    source: Optional[str] = None
    age_seconds: Optional[float] = None
    fresh: bool = False


class DetailedHealthStatus(HealthStatus):
    """Detailed health status with payment rail and rate cache information."""
    payment_adapters: List[PaymentAdapterStatus]
    exchange_rates: ExchangeRateStatus


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic health status of the service."
)
async def get_health() -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        HealthStatus: Basic service health status
    """
    logger.debug("Health check requested")
    return HealthStatus(status="ok")


@health_router.get(
    "/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Returns configured payment rails and exchange rate cache state."
)
async def get_detailed_health(
    registry: PaymentAdapterRegistry = Depends(get_payment_registry),
    currency_service: CurrencyService = Depends(get_currency_service),
) -> DetailedHealthStatus:
    """
    Detailed health check endpoint.

    Args:
        registry: Payment rail registry dependency
        currency_service: Currency service dependency

    Returns:
        DetailedHealthStatus: Rails with their capabilities plus rate cache state
    """
    logger.debug("Detailed health check requested")

    adapters = [
        PaymentAdapterStatus(
            name=adapter.name,
            capabilities=sorted(c.value for c in adapter.get_capabilities()),
        )
        for adapter in registry.all()
    ]

    cache = currency_service.cache
    table = cache.table
    rates = ExchangeRateStatus(
        base=table.base if table else cache.base_currency,
        source=table.source.value if table else None,
        age_seconds=cache.age(),
        fresh=cache.is_fresh(),
    )

    return DetailedHealthStatus(
        status="ok",
        payment_adapters=adapters,
        exchange_rates=rates,
    )
