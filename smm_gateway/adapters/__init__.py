"""
Adapters package for the SMM Gateway.

This package contains components for integrating with external vendors, including:
- Abstract interfaces that define the fulfillment and payment contracts
- Concrete implementations for specific vendors
- Registries and factory functions that select an implementation
"""

from . import interfaces

from .factory import (
    build_payment_registry,
    build_provider_registry,
    create_mock_provider,
    create_provider_adapter,
    get_all_payment_adapters,
    get_payment_adapter,
)
from .registry import PaymentAdapterRegistry, ProviderRegistry

__all__ = [
    'interfaces',
    'build_payment_registry',
    'build_provider_registry',
    'create_mock_provider',
    'create_provider_adapter',
    'get_all_payment_adapters',
    'get_payment_adapter',
    'PaymentAdapterRegistry',
    'ProviderRegistry',
]
