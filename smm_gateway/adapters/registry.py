import logging
from typing import Dict, Iterable, List, Optional, Type

from smm_gateway.adapters.interfaces.payment import PaymentAdapter
from smm_gateway.adapters.interfaces.provider import ProviderAdapter
from smm_gateway.core.exceptions import AdapterNotFoundError
from smm_gateway.domain.models.provider import ProviderType

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry of fulfillment adapter implementations.
    Maps a ProviderType to the class that speaks that protocol.
    """

    def __init__(self):
        """
        Initialize an empty provider registry.
        """
        self._adaptors: Dict[ProviderType, Type[ProviderAdapter]] = {}

    def register(self, provider_type: ProviderType, adaptor_class: Type[ProviderAdapter]) -> None:
        """
        Register an adapter implementation.

        Args:
            provider_type: Protocol the adapter implements
            adaptor_class: Class to instantiate for this protocol

        Raises:
            ValueError: If the arguments are invalid or the type is already registered
        """
        if not isinstance(provider_type, ProviderType):
            raise ValueError("Provider type must be a ProviderType")

        if not isinstance(adaptor_class, type) or not issubclass(adaptor_class, ProviderAdapter):
            raise ValueError("Adaptor class must be a subclass of ProviderAdapter")

        if provider_type in self._adaptors:
            raise ValueError(f"Provider type '{provider_type.value}' is already registered")

        self._adaptors[provider_type] = adaptor_class
        logger.debug(f"Registered provider type: {provider_type.value}")

    def get(self, provider_type: ProviderType) -> Optional[Type[ProviderAdapter]]:
        """
        Retrieve an adapter implementation by type.

        Returns:
            The adapter class if found, None otherwise
        """
        return self._adaptors.get(provider_type)

    def list(self) -> List[ProviderType]:
        return list(self._adaptors.keys())

    def is_registered(self, provider_type: ProviderType) -> bool:
        return provider_type in self._adaptors


class PaymentAdapterRegistry:
    """
    Case-insensitive name lookup over constructed payment rails.
    """

    def __init__(self, adapters: Optional[Dict[str, PaymentAdapter]] = None):
        self._adapters: Dict[str, PaymentAdapter] = {}
        for name, adapter in (adapters or {}).items():
            self.register(name, adapter)

    def register(self, name: str, adapter: PaymentAdapter) -> None:
        """
        Register a payment adapter instance under ``name``.

        Raises:
            ValueError: If the name is empty, the adapter is not a PaymentAdapter,
                or the name is taken
        """
        if not name or not isinstance(name, str):
            raise ValueError("Payment adapter name must be a non-empty string")

        if not isinstance(adapter, PaymentAdapter):
            raise ValueError("Payment adapter must be a PaymentAdapter instance")

        key = name.lower()
        if key in self._adapters:
            raise ValueError(f"Payment adapter '{name}' is already registered")

        self._adapters[key] = adapter
        logger.debug(f"Registered payment adapter: {key}")

    def get(self, name: str) -> PaymentAdapter:
        """
        Look up a payment adapter by name, ignoring case.

        Raises:
            AdapterNotFoundError: If no adapter is registered under ``name``
        """
        adapter = self._adapters.get(name.lower()) if isinstance(name, str) else None
        if adapter is None:
            raise AdapterNotFoundError(str(name))
        return adapter

    def all(self) -> List[PaymentAdapter]:
        return list(self._adapters.values())

    def names(self) -> Iterable[str]:
        return list(self._adapters.keys())
