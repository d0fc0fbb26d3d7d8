from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class PaymentStatus(str, Enum):
    """
    Normalized payment status.

    Sessions use pending/processing/completed/failed, webhooks resolve to
    pending/completed/failed, and polling may additionally report refunded.
    """
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentCapability(str, Enum):
    """Operations a payment rail may support."""
    SESSIONS = "sessions"
    WEBHOOKS = "webhooks"
    STATUS_POLLING = "status_polling"
    REFUNDS = "refunds"


@dataclass
class PaymentSession:
    id: str
    amount: float
    currency: str
    status: PaymentStatus = PaymentStatus.PENDING
    payment_url: Optional[str] = None
    # Raw vendor response, kept for audit
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentWebhookEvent:
    """An inbound vendor notification, alive only while it is verified and normalized."""
    id: str
    type: str
    data: Dict[str, Any]
    signature: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class WebhookResult:
    payment_id: str
    status: PaymentStatus
    amount: float
    currency: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentStatusResult:
    status: PaymentStatus
    amount: float
    currency: str


@dataclass(frozen=True)
class RefundResult:
    success: bool
    refund_id: str


WebhookPayload = Union[str, bytes]
