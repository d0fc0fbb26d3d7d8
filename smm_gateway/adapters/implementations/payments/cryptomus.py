import base64
import hashlib
import hmac
import json
from typing import Any, Dict, Mapping, Optional

import httpx

from smm_gateway.adapters.connector import HttpConnector
from smm_gateway.adapters.interfaces.connector import HttpMethod
from smm_gateway.adapters.interfaces.payment import (
    PaymentAdapter,
    default_reference,
    map_payment_status,
    payload_to_text,
)
from smm_gateway.core.config import Settings, get_settings
from smm_gateway.core.exceptions import UpstreamError, UpstreamProtocolError
from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.payment import (
    PaymentSession,
    PaymentStatus,
    PaymentStatusResult,
    PaymentWebhookEvent,
    WebhookPayload,
    WebhookResult,
)
from smm_gateway.infrastructure.error.handler import ErrorHandler

logger = get_logger(__name__)

WEBHOOK_STATUS_MAP: Dict[str, PaymentStatus] = {
    "paid": PaymentStatus.COMPLETED,
    "paid_over": PaymentStatus.COMPLETED,
    "cancel": PaymentStatus.FAILED,
    "system_fail": PaymentStatus.FAILED,
    "fail": PaymentStatus.FAILED,
}

POLL_STATUS_MAP: Dict[str, PaymentStatus] = {
    **WEBHOOK_STATUS_MAP,
    "process": PaymentStatus.PROCESSING,
    "check": PaymentStatus.PROCESSING,
    "confirm_check": PaymentStatus.PROCESSING,
    "refund_process": PaymentStatus.REFUNDED,
    "refund_fail": PaymentStatus.REFUNDED,
    "refund_paid": PaymentStatus.REFUNDED,
}


def canonical_json(data: Any) -> bytes:
    """Compact JSON in insertion order, UTF-8 encoded; this is what gets signed."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def sign_body(body: bytes, key: str) -> str:
    """md5(base64(body) + key) as lowercase hex."""
    encoded = base64.b64encode(body).decode("ascii")
    return hashlib.md5((encoded + key).encode("utf-8")).hexdigest()


class CryptomusAdapter(PaymentAdapter):
    """
    Cryptocurrency rail.

    Requests are authenticated by a ``sign`` header computed over the exact
    bytes sent; the same scheme, keyed with the webhook secret, signs callbacks.
    """

    name = "Cryptomus"
    signature_header = "sign"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or get_settings()
        self.base_url = settings.CRYPTOMUS_BASE_URL
        self.api_key = settings.CRYPTOMUS_API_KEY
        self.merchant_id = settings.CRYPTOMUS_MERCHANT_ID
        self.webhook_secret = settings.CRYPTOMUS_WEBHOOK_SECRET
        self.session_lifetime = settings.CRYPTOMUS_SESSION_LIFETIME

        self.connector = HttpConnector(
            vendor="cryptomus",
            timeout=settings.DEFAULT_TIMEOUT,
            headers={"Content-Type": "application/json", "merchant": self.merchant_id},
            transport=transport,
        )
        self.error_handler = ErrorHandler(logger)

    async def _signed_post(self, path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        body = canonical_json(data)
        result = await self.connector.request(
            HttpMethod.POST,
            self.connector.build_url(self.base_url, path),
            content=body,
            headers={"sign": sign_body(body, self.api_key)},
        )
        payment = result.get("result") if isinstance(result, dict) else None
        if not isinstance(payment, dict):
            raise UpstreamProtocolError(
                detail=f"Cryptomus {path} response has no result object",
                vendor="cryptomus",
            )
        return payment

    async def create_payment_session(
        self,
        *,
        amount: float,
        currency: str,
        user_id: str,
        callback_url: str,
        order_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        customer_email: Optional[str] = None,
    ) -> PaymentSession:
        del metadata, customer_email  # Not carried by the crypto rail.
        data = {
            "amount": str(amount),
            "currency": currency,
            "order_id": order_id or default_reference(),
            "url_return": callback_url,
            "url_callback": callback_url,
            "lifetime": self.session_lifetime,
        }

        try:
            payment = await self._signed_post("payment", data)
            session = PaymentSession(
                id=str(payment["order_id"]),
                amount=amount,
                currency=currency,
                status=PaymentStatus.PENDING,
                payment_url=payment.get("url"),
                metadata=payment,
            )
        except KeyError as e:
            error = UpstreamProtocolError(
                detail="Cryptomus payment response is missing its order id",
                vendor="cryptomus",
                original_exception=e,
            )
            self.error_handler.handle_error(error, source="cryptomus", context={"user_id": user_id})
            raise error
        except UpstreamError as e:
            self.error_handler.handle_error(
                e, source="cryptomus", context={"operation": "create_payment_session", "user_id": user_id}
            )
            raise

        logger.info(
            f"Opened Cryptomus invoice {session.id}",
            extra={"data": {"vendor": "cryptomus", "user_id": user_id, "currency": currency}}
        )
        return session

    def verify_webhook(
        self,
        payload: WebhookPayload,
        signature: Optional[str],
        secret: Optional[str],
    ) -> bool:
        try:
            key = secret or self.webhook_secret
            if not signature or not key:
                return False

            data = json.loads(payload_to_text(payload))
            if not isinstance(data, dict):
                return False
            # The vendor signs the body without its own sign field
            data.pop("sign", None)

            expected = sign_body(canonical_json(data), key)
            return hmac.compare_digest(expected, signature)
        except Exception as e:
            logger.warning(f"Cryptomus webhook verification error: {str(e)}")
            return False

    def get_webhook_signature(self, headers: Mapping[str, str], body: Dict[str, Any]) -> Optional[str]:
        signature = headers.get(self.signature_header)
        if signature:
            return signature
        embedded = body.get("sign")
        return embedded if isinstance(embedded, str) else None

    def parse_webhook_event(self, body: Dict[str, Any], signature: Optional[str] = None) -> PaymentWebhookEvent:
        return PaymentWebhookEvent(
            id=str(body.get("uuid") or body.get("order_id") or ""),
            type=str(body.get("type") or "payment"),
            data=body,
            signature=signature,
        )

    async def handle_webhook(self, event: PaymentWebhookEvent) -> WebhookResult:
        data = event.data
        try:
            return WebhookResult(
                payment_id=str(data["order_id"]),
                status=map_payment_status(data.get("status"), WEBHOOK_STATUS_MAP),
                amount=float(data["amount"]),
                currency=str(data["currency"]),
                metadata=dict(data),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamProtocolError(
                detail="Cryptomus webhook is missing payment fields",
                vendor="cryptomus",
                context={"event_id": event.id},
                original_exception=e,
            )

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResult:
        try:
            payment = await self._signed_post("payment/info", {"order_id": payment_id})
            return PaymentStatusResult(
                status=map_payment_status(payment.get("status"), POLL_STATUS_MAP),
                amount=float(payment["amount"]),
                currency=str(payment["currency"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            error = UpstreamProtocolError(
                detail="Cryptomus payment info is missing payment fields",
                vendor="cryptomus",
                original_exception=e,
            )
            self.error_handler.handle_error(error, source="cryptomus", context={"payment_id": payment_id})
            raise error
        except UpstreamError as e:
            self.error_handler.handle_error(
                e, source="cryptomus", context={"operation": "get_payment_status", "payment_id": payment_id}
            )
            raise
