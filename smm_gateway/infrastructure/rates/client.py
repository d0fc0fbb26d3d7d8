import time
from typing import Any, Dict, Optional

import httpx

from smm_gateway.adapters.connector import HttpConnector
from smm_gateway.adapters.interfaces.connector import HttpMethod
from smm_gateway.core.config import Settings
from smm_gateway.core.exceptions import UpstreamProtocolError
from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.currency import ExchangeRateTable, RateSource

logger = get_logger(__name__)


class ExchangeRateClient:
    """
    Client for the exchange rate vendor.

    One GET to ``{api_url}/{base}?apikey=...`` answering
    ``{"base": "USD", "rates": {"EUR": 0.92, ...}}``.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        base_currency: str = "USD",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.base_currency = base_currency
        self.connector = HttpConnector(vendor="exchange_rates", timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Optional["ExchangeRateClient"]:
        """
        Build a client from settings.

        Returns:
            None when the rate vendor is not configured
        """
        if not settings.exchange_rates_configured:
            return None
        return cls(
            api_url=settings.EXCHANGE_RATE_API_URL,
            api_key=settings.EXCHANGE_RATE_API_KEY,
            base_currency=settings.BASE_CURRENCY,
            timeout=settings.DEFAULT_TIMEOUT,
            transport=transport,
        )

    async def fetch(self) -> ExchangeRateTable:
        """
        Fetch the current rate table.

        Raises:
            UpstreamProtocolError: If the response carries no usable rate mapping
            UpstreamTimeoutError: If the vendor exceeds the timeout
        """
        data = await self.connector.request(
            HttpMethod.GET,
            self.connector.build_url(self.api_url, self.base_currency),
            params={"apikey": self.api_key},
        )

        if not isinstance(data, dict):
            raise UpstreamProtocolError(detail="Rate response is not an object", vendor="exchange_rates")

        rates = self._parse_rates(data.get("rates"))
        table = ExchangeRateTable(
            base=str(data.get("base") or self.base_currency).upper(),
            rates=rates,
            fetched_at=time.time(),
            source=RateSource.LIVE,
        )
        logger.info(f"Fetched {len(rates)} exchange rates for base {table.base}")
        return table

    @staticmethod
    def _parse_rates(raw: Any) -> Dict[str, float]:
        if not isinstance(raw, dict) or not raw:
            raise UpstreamProtocolError(detail="Rate response has no rates mapping", vendor="exchange_rates")

        rates: Dict[str, float] = {}
        for code, value in raw.items():
            try:
                rates[str(code).upper()] = float(value)
            except (TypeError, ValueError) as e:
                raise UpstreamProtocolError(
                    detail=f"Rate for {code} is not a number",
                    vendor="exchange_rates",
                    original_exception=e,
                )
        return rates
