"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from smm_gateway.core.config import Settings


@pytest.mark.parametrize("timeout", [0, -1.5])
def test_non_positive_timeout_is_rejected(timeout):
    with pytest.raises(ValidationError):
        Settings(DEFAULT_TIMEOUT=timeout)


def test_negative_cache_ttl_is_rejected():
    with pytest.raises(ValidationError):
        Settings(EXCHANGE_RATE_CACHE_TTL=-1)


def test_base_currency_is_upper_cased():
    assert Settings(BASE_CURRENCY=" eur ").BASE_CURRENCY == "EUR"


def test_rate_vendor_needs_url_and_key():
    assert Settings(EXCHANGE_RATE_API_URL="https://rates.test", EXCHANGE_RATE_API_KEY=None).exchange_rates_configured is False
    assert Settings(EXCHANGE_RATE_API_URL="https://rates.test", EXCHANGE_RATE_API_KEY="k").exchange_rates_configured is True
