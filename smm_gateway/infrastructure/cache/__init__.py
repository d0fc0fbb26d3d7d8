from .rate_cache import ExchangeRateCache, RateFetcher

__all__ = ["ExchangeRateCache", "RateFetcher"]
