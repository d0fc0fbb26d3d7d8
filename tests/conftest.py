"""
Shared fixtures for the SMM Gateway test suite.

Vendor HTTP traffic is served by ``httpx.MockTransport`` handlers; nothing
here touches the network.
"""

import json
from typing import Any, Callable

import httpx
import pytest

from smm_gateway.core.config import Settings
from smm_gateway.domain.models.provider import ProviderConfig, ProviderType
from tests.helpers import RecordingTransport


@pytest.fixture
def settings() -> Settings:
    return Settings(
        KORAPAY_BASE_URL="https://korapay.test/api/v1",
        KORAPAY_PUBLIC_KEY="pk_test",
        KORAPAY_SECRET_KEY="sk_test",
        KORAPAY_WEBHOOK_SECRET="kora_whsec",
        CRYPTOMUS_BASE_URL="https://cryptomus.test/v1",
        CRYPTOMUS_API_KEY="crypto_key",
        CRYPTOMUS_MERCHANT_ID="merchant-1",
        CRYPTOMUS_WEBHOOK_SECRET="crypto_whsec",
        EXCHANGE_RATE_API_URL=None,
        EXCHANGE_RATE_API_KEY=None,
        DEFAULT_TIMEOUT=5.0,
    )


@pytest.fixture
def provider_config() -> Callable[..., ProviderConfig]:
    """Factory for fulfillment vendor records; keyword overrides win."""

    def _make(**overrides: Any) -> ProviderConfig:
        data = {
            "id": "prov-1",
            "name": "Acme Panel",
            "type": ProviderType.REST_JSON,
            "base_url": "https://panel.test/api/v2",
            "api_key": "panel-key",
            "rate_multiplier": 1.0,
            "timeout": 5000,
        }
        data.update(overrides)
        return ProviderConfig(**data)

    return _make


@pytest.fixture
def json_transport() -> Callable[..., RecordingTransport]:
    """Transport answering every request with the same JSON body and status."""

    def _make(body: Any, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(
            lambda request: httpx.Response(status_code, content=json.dumps(body).encode("utf-8"))
        )

    return _make
