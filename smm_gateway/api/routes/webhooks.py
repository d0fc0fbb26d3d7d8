import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status

from smm_gateway.adapters.registry import PaymentAdapterRegistry
from smm_gateway.api.dependencies import get_payment_registry
from smm_gateway.core.exceptions import WebhookVerificationError
from smm_gateway.core.logging import get_logger

# Initialize router and logger
webhook_router = APIRouter()
logger = get_logger(__name__)


@webhook_router.post(
    "/{provider}",
    status_code=status.HTTP_200_OK,
    summary="Receive a payment webhook",
    description="Verifies a payment rail notification and returns it normalized."
)
async def receive_webhook(
    provider: str,
    request: Request,
    registry: PaymentAdapterRegistry = Depends(get_payment_registry),
) -> Dict[str, Any]:
    """
    Verify, then normalize, an inbound payment notification.

    Nothing is persisted here; the caller stores the returned event.

    Args:
        provider: Payment rail name, matched case-insensitively
        request: Raw inbound request

    Returns:
        Dict: Normalized payment id, status, amount, currency and metadata

    Raises:
        AdapterNotFoundError: If ``provider`` is not a configured rail
        WebhookVerificationError: If the body or signature does not verify
    """
    adapter = registry.get(provider)
    raw_body = await request.body()

    try:
        body = json.loads(raw_body)
    except ValueError:
        body = None
    if not isinstance(body, dict):
        logger.warning(f"Rejected {provider} webhook: body is not a JSON object")
        raise WebhookVerificationError(provider)

    signature = adapter.get_webhook_signature(request.headers, body)
    # The adapter's configured webhook secret is used
    if not adapter.verify_webhook(raw_body, signature, None):
        logger.warning(f"Rejected {provider} webhook: signature mismatch")
        raise WebhookVerificationError(provider)

    event = adapter.parse_webhook_event(body, signature)
    result = await adapter.handle_webhook(event)

    logger.info(
        f"Accepted {adapter.name} webhook for payment {result.payment_id}",
        extra={"data": {"provider": provider, "status": result.status.value}}
    )
    return {
        "payment_id": result.payment_id,
        "status": result.status.value,
        "amount": result.amount,
        "currency": result.currency,
        "metadata": result.metadata,
    }
