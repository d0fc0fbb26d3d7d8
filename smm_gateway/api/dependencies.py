from functools import lru_cache

from smm_gateway.adapters.factory import get_payment_registry as build_cached_payment_registry
from smm_gateway.adapters.registry import PaymentAdapterRegistry
from smm_gateway.core.config import get_settings
from smm_gateway.core.logging import get_logger
from smm_gateway.services.currency_service import CurrencyService

# Initialize logger
logger = get_logger(__name__)


def get_payment_registry() -> PaymentAdapterRegistry:
    """
    Dependency for providing the payment rail registry.

    Returns:
        PaymentAdapterRegistry: Process-wide registry built from settings
    """
    return build_cached_payment_registry()


@lru_cache()
def get_currency_service() -> CurrencyService:
    """
    Dependency for providing the currency service.

    One instance per process, so every request shares the same rate cache.

    Returns:
        CurrencyService: Service wired to the configured rate vendor
    """
    settings = get_settings()
    if not settings.exchange_rates_configured:
        logger.info("No exchange rate vendor configured; conversions use built-in rates")
    return CurrencyService.from_settings(settings)
