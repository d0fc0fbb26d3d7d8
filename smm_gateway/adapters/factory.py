import logging
from functools import lru_cache
from typing import List, Optional

import httpx

from smm_gateway.adapters.implementations.payments import (
    PAYMENT_CRYPTOMUS,
    PAYMENT_KORAPAY,
    CryptomusAdapter,
    KorapayAdapter,
)
from smm_gateway.adapters.implementations.providers import (
    MockProviderAdapter,
    RestJsonProviderAdapter,
)
from smm_gateway.adapters.interfaces.payment import PaymentAdapter
from smm_gateway.adapters.interfaces.provider import ProviderAdapter
from smm_gateway.adapters.registry import PaymentAdapterRegistry, ProviderRegistry
from smm_gateway.core.config import Settings, get_settings
from smm_gateway.core.exceptions import UnsupportedProviderTypeError
from smm_gateway.domain.models.provider import ProviderConfig, ProviderType

logger = logging.getLogger(__name__)


def build_provider_registry() -> ProviderRegistry:
    """
    Registry of every fulfillment protocol that has an implementation.

    REST_XML and SOAP are valid ProviderType values with no adapter yet.
    """
    registry = ProviderRegistry()
    registry.register(ProviderType.REST_JSON, RestJsonProviderAdapter)
    return registry


def create_provider_adapter(
    config: ProviderConfig,
    registry: Optional[ProviderRegistry] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProviderAdapter:
    """
    Create the adapter matching ``config.type``.

    Args:
        config: Stored vendor connection record
        registry: Optional registry; defaults to every built-in protocol
        transport: Optional httpx transport handed to the adapter

    Returns:
        A fresh adapter bound to ``config``

    Raises:
        UnsupportedProviderTypeError: If no adapter implements ``config.type``
    """
    registry = registry or build_provider_registry()
    adaptor_class = registry.get(config.type)

    if adaptor_class is None:
        logger.error(f"No adapter for provider '{config.name}' of type {config.type.value}")
        raise UnsupportedProviderTypeError(config.type)

    return adaptor_class(config, transport=transport)


def create_mock_provider() -> ProviderAdapter:
    return MockProviderAdapter()


def build_payment_registry(settings: Optional[Settings] = None) -> PaymentAdapterRegistry:
    """Constructs one instance of every payment rail from settings."""
    settings = settings or get_settings()
    return PaymentAdapterRegistry({
        PAYMENT_KORAPAY: KorapayAdapter(settings),
        PAYMENT_CRYPTOMUS: CryptomusAdapter(settings),
    })


@lru_cache()
def get_payment_registry() -> PaymentAdapterRegistry:
    return build_payment_registry()


def get_payment_adapter(name: str) -> PaymentAdapter:
    """
    Look up a configured payment rail by name (case-insensitive).

    Raises:
        AdapterNotFoundError: If ``name`` is not a known rail
    """
    return get_payment_registry().get(name)


def get_all_payment_adapters() -> List[PaymentAdapter]:
    return get_payment_registry().all()
