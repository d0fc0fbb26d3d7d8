import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, Optional

import httpx

from smm_gateway.core.config import Settings, get_settings
from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.currency import ExchangeRateTable
from smm_gateway.infrastructure.cache.rate_cache import ExchangeRateCache
from smm_gateway.infrastructure.rates.client import ExchangeRateClient

logger = get_logger(__name__)

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "NGN": "₦",
    "GHS": "₵",
    "KES": "KSh",
    "ZAR": "R",
    "BTC": "₿",
    "ETH": "Ξ",
    "USDT": "₮",
}

CRYPTO_CURRENCIES = frozenset({"BTC", "ETH", "USDT", "USDC", "BNB"})

# Shown with 8 decimals; stablecoins display like fiat
HIGH_PRECISION_CURRENCIES = frozenset({"BTC", "ETH"})

TWO_PLACES = Decimal("0.01")


def round_money(value: float) -> float:
    """Round half-up to two decimal places. Non-finite values pass through."""
    if not math.isfinite(value):
        return value

    amount = Decimal(str(value))
    with localcontext() as ctx:
        # Enough digits for every integer place plus the two decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return float(amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def is_crypto_currency(currency: str) -> bool:
    return currency.upper() in CRYPTO_CURRENCIES


def format_currency_with_symbol(amount: float, currency: str) -> str:
    """
    Display formatting only.

    Examples:
        >>> format_currency_with_symbol(1234.5, "NGN")
        '₦1234.50'
        >>> format_currency_with_symbol(0.00012, "BTC")
        '₿0.00012000'
    """
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, currency)
    if code in HIGH_PRECISION_CURRENCIES:
        return f"{symbol}{amount:.8f}"
    return f"{symbol}{amount:.2f}"


class CurrencyService:
    """Converts amounts between currencies through the cached base-currency table."""

    def __init__(self, cache: ExchangeRateCache, default_markup: float = 0.0):
        """
        Initialize the service.

        Args:
            cache: Exchange rate cache shared by every caller in the process
            default_markup: Percent returned by ``get_currency_markup``
        """
        self.cache = cache
        self.default_markup = default_markup

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "CurrencyService":
        settings = settings or get_settings()
        client = ExchangeRateClient.from_settings(settings, transport=transport)
        cache = ExchangeRateCache(
            fetcher=client.fetch if client is not None else None,
            ttl=settings.EXCHANGE_RATE_CACHE_TTL,
            base_currency=settings.BASE_CURRENCY,
        )
        return cls(cache, default_markup=settings.DEFAULT_CURRENCY_MARKUP)

    async def fetch_exchange_rates(self) -> ExchangeRateTable:
        """Best available rate table; never raises."""
        return await self.cache.get_rates()

    async def convert_currency(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        markup_percent: float = 0.0,
    ) -> float:
        """
        Convert ``amount`` through the base currency and apply a percent markup.

        Identical currencies return ``amount`` untouched without reading rates.

        Args:
            amount: Amount in ``from_currency``
            from_currency: Source currency code
            to_currency: Target currency code
            markup_percent: Fee added on top, in percent

        Returns:
            float: Converted amount rounded half-up to two decimals
        """
        from_code = from_currency.upper()
        to_code = to_currency.upper()
        if from_code == to_code:
            return amount

        table = await self.fetch_exchange_rates()
        base_amount = amount / table.rate_for(from_code)
        converted = base_amount * table.rate_for(to_code)
        return round_money(converted * (1 + markup_percent / 100))

    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> float:
        from_code = from_currency.upper()
        to_code = to_currency.upper()
        if from_code == to_code:
            return 1.0

        table = await self.fetch_exchange_rates()
        return table.rate_for(to_code) / table.rate_for(from_code)

    def get_currency_markup(self, currency: str) -> float:
        del currency  # Same markup for every currency
        return self.default_markup
