import dataclasses
import time
from typing import Awaitable, Callable, Optional

from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.currency import DEFAULT_RATES, ExchangeRateTable, RateSource

logger = get_logger(__name__)

RateFetcher = Callable[[], Awaitable[ExchangeRateTable]]


class ExchangeRateCache:
    """
    Single-slot cache of the exchange rate table.

    Lookups resolve, in order, to: the cached table while younger than the
    TTL; a fresh table from ``fetcher``; the previous table if the refresh
    failed; the built-in default table. They never raise.

    Concurrent refreshes on a miss are not serialized; the last one to
    finish wins.
    """

    def __init__(
        self,
        fetcher: Optional[RateFetcher],
        ttl: float,
        base_currency: str = "USD",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            fetcher: Coroutine function returning a fresh table, or None when
                no rate vendor is configured
            ttl: Seconds a table is served without refresh
            base_currency: Base code stamped on the built-in default table
            clock: Seconds-returning clock, injectable for tests
        """
        self.fetcher = fetcher
        self.ttl = ttl
        self.base_currency = base_currency
        self.clock = clock
        self._table: Optional[ExchangeRateTable] = None

    @property
    def table(self) -> Optional[ExchangeRateTable]:
        return self._table

    def age(self) -> Optional[float]:
        """Seconds since the cached table was stored, or None if empty."""
        if self._table is None:
            return None
        return self.clock() - self._table.fetched_at

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self.ttl

    def invalidate(self) -> None:
        self._table = None

    def default_table(self) -> ExchangeRateTable:
        return ExchangeRateTable(
            base=self.base_currency,
            rates=dict(DEFAULT_RATES),
            fetched_at=self.clock(),
            source=RateSource.DEFAULT,
        )

    async def get_rates(self) -> ExchangeRateTable:
        if self.is_fresh():
            return self._table

        if self.fetcher is None:
            logger.warning("Exchange rate API not configured, using built-in rates")
            self._table = self.default_table()
            return self._table

        previous = self._table
        try:
            fresh = await self.fetcher()
        except Exception as e:
            logger.error(
                f"Error fetching exchange rates: {str(e)}",
                extra={"data": {"has_stale_table": previous is not None}}
            )
            if previous is not None:
                return previous
            self._table = self.default_table()
            return self._table

        self._table = dataclasses.replace(fresh, fetched_at=self.clock())
        return self._table
