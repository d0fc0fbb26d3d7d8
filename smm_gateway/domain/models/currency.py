from dataclasses import dataclass
from enum import Enum
from typing import Dict


class RateSource(str, Enum):
    """Where a rate table came from."""
    LIVE = "live"
    DEFAULT = "default"


@dataclass(frozen=True)
class ExchangeRateTable:
    """
    Rates relative to ``base``.

    ``fetched_at`` is in the same unit as the cache clock (seconds).
    Tables are replaced wholesale, never merged.
    """
    base: str
    rates: Dict[str, float]
    fetched_at: float
    source: RateSource = RateSource.LIVE

    def rate_for(self, currency: str) -> float:
        """Rate for ``currency``; codes missing from the table count as 1."""
        return self.rates.get(currency) or 1.0


SUPPORTED_CURRENCIES = (
    "USD",
    "EUR",
    "GBP",
    "NGN",
    "GHS",
    "KES",
    "ZAR",
    "BTC",
    "ETH",
    "USDT",
)

# Built-in USD-based rates used when no live table can be had
DEFAULT_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "NGN": 1550.0,
    "GHS": 15.5,
    "KES": 158.0,
    "ZAR": 19.2,
    "BTC": 0.000023,
    "ETH": 0.00041,
    "USDT": 1.001,
}
