"""
Payment rail adapters.
"""

from smm_gateway.adapters.implementations.payments.cryptomus import CryptomusAdapter
from smm_gateway.adapters.implementations.payments.korapay import KorapayAdapter

# Registry names for each rail
PAYMENT_KORAPAY = "korapay"
PAYMENT_CRYPTOMUS = "cryptomus"

__all__ = [
    "CryptomusAdapter",
    "KorapayAdapter",
    "PAYMENT_KORAPAY",
    "PAYMENT_CRYPTOMUS",
]
