"""
Interfaces package for the SMM Gateway.

This package contains the abstract contracts every vendor adapter implements,
plus the connector contract they share for outbound HTTP.
"""

from .connector import APIConnector, HttpMethod
from .provider import ProviderAdapter, normalize_order_status
from .payment import PaymentAdapter, map_payment_status

__all__ = [
    # Connector interface
    'APIConnector',
    'HttpMethod',

    # Fulfillment vendor interface
    'ProviderAdapter',
    'normalize_order_status',

    # Payment rail interface
    'PaymentAdapter',
    'map_payment_status',
]
