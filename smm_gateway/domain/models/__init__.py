from smm_gateway.domain.models.currency import (
    DEFAULT_RATES,
    SUPPORTED_CURRENCIES,
    ExchangeRateTable,
    RateSource,
)
from smm_gateway.domain.models.payment import (
    PaymentCapability,
    PaymentSession,
    PaymentStatus,
    PaymentStatusResult,
    PaymentWebhookEvent,
    RefundResult,
    WebhookPayload,
    WebhookResult,
)
from smm_gateway.domain.models.provider import (
    BalanceResult,
    CreateOrderParams,
    OrderStatus,
    ProviderConfig,
    ProviderMapping,
    ProviderMeta,
    ProviderOrder,
    ProviderService,
    ProviderType,
)

__all__ = [
    "DEFAULT_RATES",
    "SUPPORTED_CURRENCIES",
    "ExchangeRateTable",
    "RateSource",
    "PaymentCapability",
    "PaymentSession",
    "PaymentStatus",
    "PaymentStatusResult",
    "PaymentWebhookEvent",
    "RefundResult",
    "WebhookPayload",
    "WebhookResult",
    "BalanceResult",
    "CreateOrderParams",
    "OrderStatus",
    "ProviderConfig",
    "ProviderMapping",
    "ProviderMeta",
    "ProviderOrder",
    "ProviderService",
    "ProviderType",
]
