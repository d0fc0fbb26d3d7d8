"""
Fulfillment vendor adapters.
"""

from smm_gateway.adapters.implementations.providers.mock import MockProviderAdapter
from smm_gateway.adapters.implementations.providers.rest_json import RestJsonProviderAdapter

__all__ = [
    "MockProviderAdapter",
    "RestJsonProviderAdapter",
]
