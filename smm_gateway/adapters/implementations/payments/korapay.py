import hashlib
import hmac
import json
from typing import Any, Dict, Optional
from urllib.parse import quote

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
from smm_gateway.core.exceptions import (
    PaymentValidationError,
    UpstreamError,
    UpstreamProtocolError,
)
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
    "success": PaymentStatus.COMPLETED,
    "failed": PaymentStatus.FAILED,
}

POLL_STATUS_MAP: Dict[str, PaymentStatus] = {
    **WEBHOOK_STATUS_MAP,
    "processing": PaymentStatus.PROCESSING,
}


class KorapayAdapter(PaymentAdapter):
    """
    Card/bank rail.

    Outbound calls authenticate with the secret key as a bearer token;
    webhooks are signed with HMAC-SHA256 over the raw body.
    """

    name = "Korapay"
    signature_header = "x-korapay-signature"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or get_settings()
        self.base_url = settings.KORAPAY_BASE_URL
        self.public_key = settings.KORAPAY_PUBLIC_KEY
        self.secret_key = settings.KORAPAY_SECRET_KEY
        self.webhook_secret = settings.KORAPAY_WEBHOOK_SECRET

        self.connector = HttpConnector(
            vendor="korapay",
            timeout=settings.DEFAULT_TIMEOUT,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.secret_key}",
            },
            transport=transport,
        )
        self.error_handler = ErrorHandler(logger)

    def _unwrap(self, result: Any, operation: str) -> Dict[str, Any]:
        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, dict):
            raise UpstreamProtocolError(
                detail=f"Korapay {operation} response has no data object",
                vendor="korapay",
            )
        return data

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
        if not customer_email:
            raise PaymentValidationError(
                detail="Korapay requires the customer's email address",
                field="customer_email",
            )

        body: Dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "redirect_url": callback_url,
            "reference": order_id or default_reference(),
            "customer": {"email": customer_email},
        }
        if metadata:
            body["metadata"] = metadata

        try:
            result = await self.connector.request(
                HttpMethod.POST,
                self.connector.build_url(self.base_url, "charges/initialize"),
                json=body,
            )
            data = self._unwrap(result, "charge initialization")
            session = PaymentSession(
                id=str(data["reference"]),
                amount=amount,
                currency=currency,
                status=PaymentStatus.PENDING,
                payment_url=data.get("checkout_url"),
                metadata=data,
            )
        except KeyError as e:
            error = UpstreamProtocolError(
                detail="Korapay charge response is missing its reference",
                vendor="korapay",
                original_exception=e,
            )
            self.error_handler.handle_error(error, source="korapay", context={"user_id": user_id})
            raise error
        except UpstreamError as e:
            self.error_handler.handle_error(
                e, source="korapay", context={"operation": "create_payment_session", "user_id": user_id}
            )
            raise

        logger.info(
            f"Opened Korapay session {session.id}",
            extra={"data": {"vendor": "korapay", "user_id": user_id, "currency": currency}}
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

            raw = payload_to_text(payload)
            # Only structured payloads can be genuine
            json.loads(raw)

            expected = hmac.new(key.encode("utf-8"), raw.encode("utf-8"), hashlib.sha256).hexdigest()
            return hmac.compare_digest(expected, signature)
        except Exception as e:
            logger.warning(f"Korapay webhook verification error: {str(e)}")
            return False

    def parse_webhook_event(self, body: Dict[str, Any], signature: Optional[str] = None) -> PaymentWebhookEvent:
        data = body.get("data")
        if not isinstance(data, dict):
            data = body
        return PaymentWebhookEvent(
            id=str(data.get("reference") or body.get("id") or ""),
            type=str(body.get("event") or "charge"),
            data=data,
            signature=signature,
        )

    async def handle_webhook(self, event: PaymentWebhookEvent) -> WebhookResult:
        data = event.data
        try:
            return WebhookResult(
                payment_id=str(data["reference"]),
                status=map_payment_status(data.get("status"), WEBHOOK_STATUS_MAP),
                amount=float(data["amount"]),
                currency=str(data["currency"]),
                metadata=dict(data),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamProtocolError(
                detail="Korapay webhook is missing payment fields",
                vendor="korapay",
                context={"event_id": event.id},
                original_exception=e,
            )

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResult:
        try:
            result = await self.connector.request(
                HttpMethod.GET,
                self.connector.build_url(self.base_url, f"charges/{quote(payment_id, safe='')}"),
            )
            charge = self._unwrap(result, "charge lookup")
            return PaymentStatusResult(
                status=map_payment_status(charge.get("status"), POLL_STATUS_MAP),
                amount=float(charge["amount"]),
                currency=str(charge["currency"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            error = UpstreamProtocolError(
                detail="Korapay charge lookup is missing payment fields",
                vendor="korapay",
                original_exception=e,
            )
            self.error_handler.handle_error(error, source="korapay", context={"payment_id": payment_id})
            raise error
        except UpstreamError as e:
            self.error_handler.handle_error(
                e, source="korapay", context={"operation": "get_payment_status", "payment_id": payment_id}
            )
            raise
