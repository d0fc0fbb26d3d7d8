"""Tests for the HTTP surface: health checks and inbound payment webhooks."""

import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from smm_gateway.adapters import build_payment_registry
from smm_gateway.adapters.implementations.payments.cryptomus import canonical_json, sign_body
from smm_gateway.api.dependencies import get_currency_service, get_payment_registry
from smm_gateway.core.config import get_settings
from smm_gateway.infrastructure.cache import ExchangeRateCache
from smm_gateway.main import create_application
from smm_gateway.services import CurrencyService

API = get_settings().API_V1_STR


@pytest.fixture
def client(settings):
    app = create_application()
    app.dependency_overrides[get_payment_registry] = lambda: build_payment_registry(settings)
    app.dependency_overrides[get_currency_service] = lambda: CurrencyService(ExchangeRateCache(None, ttl=3600))
    with TestClient(app) as test_client:
        yield test_client


def korapay_request(status: str, secret: str = "kora_whsec"):
    raw = json.dumps({
        "event": f"charge.{status}",
        "data": {"reference": "order-42", "status": status, "amount": 5000, "currency": "NGN"},
    }).encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), raw, hashlib.sha256).hexdigest()
    return raw, {"x-korapay-signature": signature, "Content-Type": "application/json"}


def test_health(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "SMM Gateway"
    assert "X-Correlation-ID" in response.headers


def test_correlation_id_is_echoed(client):
    response = client.get(f"{API}/health", headers={"X-Correlation-ID": "req-123"})

    assert response.headers["X-Correlation-ID"] == "req-123"


def test_detailed_health_lists_rails_and_rate_cache(client):
    response = client.get(f"{API}/health/detailed")

    assert response.status_code == 200
    body = response.json()
    names = sorted(adapter["name"] for adapter in body["payment_adapters"])
    assert names == ["Cryptomus", "Korapay"]
    assert "refunds" not in body["payment_adapters"][0]["capabilities"]
    assert body["exchange_rates"]["base"] == "USD"
    assert body["exchange_rates"]["source"] is None
    assert body["exchange_rates"]["fresh"] is False


def test_korapay_webhook_is_verified_and_normalized(client):
    raw, headers = korapay_request("success")

    response = client.post(f"{API}/webhooks/korapay", content=raw, headers=headers)

    assert response.status_code == 200
    assert response.json() == {
        "payment_id": "order-42",
        "status": "completed",
        "amount": 5000.0,
        "currency": "NGN",
        "metadata": {"reference": "order-42", "status": "success", "amount": 5000, "currency": "NGN"},
    }


def test_provider_name_is_case_insensitive(client):
    raw, headers = korapay_request("failed")

    response = client.post(f"{API}/webhooks/KoraPay", content=raw, headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "failed"


def test_bad_signature_is_rejected(client):
    raw, headers = korapay_request("success", secret="forged")

    response = client.post(f"{API}/webhooks/korapay", content=raw, headers=headers)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "webhook_verification_failed"


def test_non_json_body_is_rejected(client):
    response = client.post(
        f"{API}/webhooks/korapay",
        content=b"definitely not json",
        headers={"x-korapay-signature": "abc"},
    )

    assert response.status_code == 401


def test_unknown_provider_is_not_found(client):
    raw, headers = korapay_request("success")

    response = client.post(f"{API}/webhooks/paypal", content=raw, headers=headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "adapter_not_found"


def test_cryptomus_webhook_signed_in_body(client):
    data = {
        "type": "payment",
        "uuid": "a1b2c3",
        "order_id": "order-7",
        "amount": "15.00",
        "currency": "USDT",
        "status": "paid_over",
    }
    payload = {**data, "sign": sign_body(canonical_json(data), "crypto_whsec")}

    response = client.post(f"{API}/webhooks/cryptomus", content=json.dumps(payload))

    assert response.status_code == 200
    assert response.json()["payment_id"] == "order-7"
    assert response.json()["status"] == "completed"
    assert response.json()["amount"] == 15.0


def test_verified_webhook_missing_fields_is_bad_gateway(client):
    raw = json.dumps({"event": "charge.success", "data": {"status": "success"}}).encode("utf-8")
    signature = hmac.new(b"kora_whsec", raw, hashlib.sha256).hexdigest()

    response = client.post(f"{API}/webhooks/korapay", content=raw, headers={"x-korapay-signature": signature})

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "upstream_protocol_error"
    assert "original_error" not in response.json()["error"]["context"]
