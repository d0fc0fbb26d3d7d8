from .client import ExchangeRateClient

__all__ = ["ExchangeRateClient"]
