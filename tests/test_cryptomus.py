"""Tests for the cryptocurrency payment rail."""

import asyncio
import base64
import hashlib
import json

import httpx
import pytest

from smm_gateway.adapters.implementations.payments import CryptomusAdapter
from smm_gateway.adapters.implementations.payments.cryptomus import canonical_json, sign_body
from smm_gateway.core.exceptions import UpstreamProtocolError, UpstreamTimeoutError
from smm_gateway.domain.models.payment import PaymentStatus
from tests.helpers import json_response

WEBHOOK_SECRET = "crypto_whsec"


def signed_webhook(status: str, key: str = WEBHOOK_SECRET) -> dict:
    data = {
        "type": "payment",
        "uuid": "a1b2c3",
        "order_id": "order-7",
        "amount": "15.00",
        "currency": "USDT",
        "status": status,
    }
    return {**data, "sign": sign_body(canonical_json(data), key)}


@pytest.fixture
def adapter(settings):
    return CryptomusAdapter(settings)


def test_sign_body_is_md5_of_base64_plus_key():
    body = b'{"a":1}'
    expected = hashlib.md5((base64.b64encode(body).decode("ascii") + "k").encode("utf-8")).hexdigest()

    assert sign_body(body, "k") == expected


def test_canonical_json_is_compact_and_keeps_unicode():
    assert canonical_json({"a": 1, "b": "café"}) == '{"a":1,"b":"café"}'.encode("utf-8")


def test_verify_webhook_accepts_valid_signature(adapter):
    body = signed_webhook("paid")
    raw = json.dumps(body)

    assert adapter.verify_webhook(raw, body["sign"], WEBHOOK_SECRET) is True
    assert adapter.verify_webhook(raw.encode("utf-8"), body["sign"], None) is True


def test_verify_webhook_rejects_tampered_body(adapter):
    body = signed_webhook("paid")
    body["amount"] = "1500.00"

    assert adapter.verify_webhook(json.dumps(body), body["sign"], WEBHOOK_SECRET) is False


def test_verify_webhook_rejects_malformed_payloads(adapter):
    assert adapter.verify_webhook("{not json", "abc", WEBHOOK_SECRET) is False
    assert adapter.verify_webhook("[1, 2, 3]", "abc", WEBHOOK_SECRET) is False
    assert adapter.verify_webhook(b"\xff\xfe", "abc", WEBHOOK_SECRET) is False


def test_verify_webhook_without_signature_is_false(adapter):
    body = signed_webhook("paid")

    assert adapter.verify_webhook(json.dumps(body), None, WEBHOOK_SECRET) is False
    assert adapter.verify_webhook(json.dumps(body), "", WEBHOOK_SECRET) is False


def test_signature_falls_back_to_body_field(adapter):
    body = signed_webhook("paid")

    assert adapter.get_webhook_signature({}, body) == body["sign"]
    assert adapter.get_webhook_signature({"sign": "from-header"}, body) == "from-header"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "vendor_status, expected",
    [
        ("paid", PaymentStatus.COMPLETED),
        ("paid_over", PaymentStatus.COMPLETED),
        ("cancel", PaymentStatus.FAILED),
        ("fail", PaymentStatus.FAILED),
        ("system_fail", PaymentStatus.FAILED),
        ("wrong_amount", PaymentStatus.PENDING),
        ("check", PaymentStatus.PENDING),
    ],
)
async def test_handle_webhook_maps_status(adapter, vendor_status, expected):
    event = adapter.parse_webhook_event(signed_webhook(vendor_status))

    result = await adapter.handle_webhook(event)

    assert event.id == "a1b2c3"
    assert result.payment_id == "order-7"
    assert result.status == expected
    assert result.amount == 15.0
    assert result.currency == "USDT"


@pytest.mark.asyncio
async def test_create_payment_session_signs_exact_bytes(settings, json_transport):
    transport = json_transport({
        "state": 0,
        "result": {"uuid": "inv-1", "order_id": "order-9", "url": "https://pay.cryptomus.test/inv-1"},
    })
    adapter = CryptomusAdapter(settings, transport=transport)

    session = await adapter.create_payment_session(
        amount=10.5,
        currency="USDT",
        user_id="user-1",
        callback_url="https://shop.test/callback",
        order_id="order-9",
    )

    assert session.id == "order-9"
    assert session.payment_url == "https://pay.cryptomus.test/inv-1"
    assert session.status == PaymentStatus.PENDING

    request = transport.last
    assert str(request.url) == "https://cryptomus.test/v1/payment"
    assert request.headers["merchant"] == "merchant-1"
    assert request.headers["sign"] == sign_body(request.content, "crypto_key")

    body = json.loads(request.content)
    assert body["amount"] == "10.5"
    assert body["order_id"] == "order-9"
    assert body["url_callback"] == "https://shop.test/callback"
    assert body["lifetime"] == 3600


@pytest.mark.asyncio
async def test_create_payment_session_without_result_raises(settings, json_transport):
    adapter = CryptomusAdapter(settings, transport=json_transport({"state": 1, "message": "bad merchant"}))

    with pytest.raises(UpstreamProtocolError):
        await adapter.create_payment_session(
            amount=1.0, currency="USDT", user_id="u", callback_url="https://shop.test/callback"
        )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "vendor_status, expected",
    [
        ("paid", PaymentStatus.COMPLETED),
        ("process", PaymentStatus.PROCESSING),
        ("confirm_check", PaymentStatus.PROCESSING),
        ("refund_paid", PaymentStatus.REFUNDED),
        ("refund_process", PaymentStatus.REFUNDED),
        ("system_fail", PaymentStatus.FAILED),
        ("locked", PaymentStatus.PENDING),
    ],
)
async def test_get_payment_status_polls_info(settings, json_transport, vendor_status, expected):
    transport = json_transport({"result": {"status": vendor_status, "amount": "15.00", "currency": "USDT"}})
    adapter = CryptomusAdapter(settings, transport=transport)

    result = await adapter.get_payment_status("order-7")

    assert result.status == expected
    assert transport.last.url.path == "/v1/payment/info"
    assert json.loads(transport.last.content) == {"order_id": "order-7"}


@pytest.mark.asyncio
async def test_get_payment_status_vendor_failure_raises(settings, json_transport):
    adapter = CryptomusAdapter(settings, transport=json_transport({}, 500))

    with pytest.raises(UpstreamProtocolError):
        await adapter.get_payment_status("order-7")


@pytest.fixture
def slow_adapter(settings):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return json_response({"result": {}})

    settings.DEFAULT_TIMEOUT = 0.05
    return CryptomusAdapter(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_slow_session_creation_is_cut_off(slow_adapter):
    with pytest.raises(UpstreamTimeoutError) as exc_info:
        await slow_adapter.create_payment_session(
            amount=1.0, currency="USDT", user_id="u", callback_url="https://shop.test/callback"
        )

    assert exc_info.value.vendor == "cryptomus"
    assert exc_info.value.timeout == pytest.approx(0.05)


@pytest.mark.asyncio
async def test_slow_status_poll_is_cut_off(slow_adapter):
    with pytest.raises(UpstreamTimeoutError):
        await slow_adapter.get_payment_status("order-7")
