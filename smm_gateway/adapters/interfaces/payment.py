from abc import ABC, abstractmethod
import time
import uuid
from typing import Any, Dict, Mapping, Optional, Set

from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.payment import (
    PaymentCapability,
    PaymentSession,
    PaymentStatus,
    PaymentStatusResult,
    PaymentWebhookEvent,
    WebhookPayload,
    WebhookResult,
)

logger = get_logger(__name__)


def map_payment_status(
    raw_status: Any,
    table: Mapping[str, PaymentStatus],
) -> PaymentStatus:
    """Looks up a vendor payment status; anything unmapped is PENDING."""
    if not isinstance(raw_status, str):
        return PaymentStatus.PENDING
    status = table.get(raw_status)
    if status is None:
        logger.debug(f"Unmapped vendor payment status '{raw_status}', treating as pending")
        return PaymentStatus.PENDING
    return status


def default_reference() -> str:
    """Reference used when the caller does not supply an order id."""
    return f"order_{int(time.time() * 1000)}"


def payload_to_text(payload: WebhookPayload) -> str:
    if isinstance(payload, bytes):
        return payload.decode("utf-8")
    return payload


class PaymentAdapter(ABC):
    """
    Abstract base interface for payment rails.

    Refunds are an optional capability: a rail supports them only if it
    defines ``refund_payment(payment_id, amount=None) -> RefundResult``.
    """

    name: str
    # Header that carries the vendor's webhook signature
    signature_header: str

    @abstractmethod
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
        """
        Opens a payment session at the vendor.

        Args:
            amount: Amount to charge, in ``currency``
            currency: ISO or crypto currency code
            user_id: Paying user's id
            callback_url: Where the vendor redirects and/or notifies
            order_id: Optional caller reference; generated when absent
            metadata: Optional data echoed back by the vendor
            customer_email: Paying user's email, for rails that require one

        Returns:
            PaymentSession: Normalized session with a checkout URL

        Raises:
            UpstreamProtocolError: If the vendor rejects the request
            UpstreamTimeoutError: If the vendor exceeds the configured timeout
        """
        pass

    @abstractmethod
    def verify_webhook(
        self,
        payload: WebhookPayload,
        signature: Optional[str],
        secret: Optional[str],
    ) -> bool:
        """
        Recomputes the vendor signature over the raw payload and compares it
        with the presented one. Returns False for malformed input; never raises.
        """
        pass

    @abstractmethod
    async def handle_webhook(self, event: PaymentWebhookEvent) -> WebhookResult:
        """
        Normalizes a verified webhook event.

        Callers must run ``verify_webhook`` first; this method does not.
        """
        pass

    @abstractmethod
    async def get_payment_status(self, payment_id: str) -> PaymentStatusResult:
        """
        Polls the vendor for a payment's current state.

        Raises:
            UpstreamProtocolError: On vendor-side HTTP failure or unexpected shape
        """
        pass

    def get_webhook_signature(self, headers: Mapping[str, str], body: Dict[str, Any]) -> Optional[str]:
        """Pulls the presented signature out of an inbound request."""
        return headers.get(self.signature_header)

    def parse_webhook_event(self, body: Dict[str, Any], signature: Optional[str] = None) -> PaymentWebhookEvent:
        """
        Wraps a decoded webhook body in a PaymentWebhookEvent.

        Rails whose payment fields sit under an envelope override this.
        """
        return PaymentWebhookEvent(
            id=str(body.get("id") or uuid.uuid4()),
            type=str(body.get("type") or "payment"),
            data=body,
            signature=signature,
        )

    def supports_refunds(self) -> bool:
        return callable(getattr(self, "refund_payment", None))

    def get_capabilities(self) -> Set[PaymentCapability]:
        """
        Returns the capabilities supported by this rail.

        Returns:
            Set[PaymentCapability]: Supported operations
        """
        capabilities = {
            PaymentCapability.SESSIONS,
            PaymentCapability.WEBHOOKS,
            PaymentCapability.STATUS_POLLING,
        }
        if self.supports_refunds():
            capabilities.add(PaymentCapability.REFUNDS)
        return capabilities
