"""
Services package for the SMM Gateway.

Services compose the adapters and infrastructure into the operations callers
use directly, such as currency conversion for pricing and settlement.
"""

from smm_gateway.services.currency_service import (
    CurrencyService,
    format_currency_with_symbol,
    is_crypto_currency,
)

__all__ = [
    "CurrencyService",
    "format_currency_with_symbol",
    "is_crypto_currency",
]
