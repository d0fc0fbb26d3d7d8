from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ProviderType(str, Enum):
    """Wire protocols a fulfillment vendor may speak."""
    REST_JSON = "REST_JSON"
    REST_XML = "REST_XML"
    SOAP = "SOAP"


class OrderStatus(str, Enum):
    """Normalized fulfillment order status."""
    PENDING = "pending"
    PROCESSING = "processing"
    PARTIAL = "partial"
    COMPLETED = "completed"
    CANCELED = "canceled"
    REFUNDED = "refunded"


class ProviderMapping(BaseModel):
    """Per-vendor overrides of the wire action names."""
    services: Optional[str] = None
    order: Optional[str] = None
    status: Optional[str] = None


class ProviderMeta(BaseModel):
    """Optional vendor-specific request tweaks."""
    headers: Dict[str, str] = Field(default_factory=dict)
    mapping: Optional[ProviderMapping] = None


class ProviderConfig(BaseModel):
    """
    Connection record for one fulfillment vendor.

    Supplied by configuration storage; adapters never mutate it.
    ``timeout`` is in milliseconds, as stored.
    """
    id: str
    name: str
    type: ProviderType
    base_url: str
    api_key: str
    rate_multiplier: float = Field(default=1.0, gt=0)
    timeout: int = Field(default=30000, gt=0)
    max_concurrency: int = Field(default=10, ge=1)
    meta: Optional[ProviderMeta] = None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @property
    def extra_headers(self) -> Dict[str, str]:
        if self.meta is None:
            return {}
        return dict(self.meta.headers)


@dataclass(frozen=True)
class ProviderService:
    """Normalized catalog entry; ``rate`` already includes the vendor multiplier."""
    id: str
    name: str
    category: str
    rate: float
    min: int
    max: int
    description: Optional[str] = None


@dataclass(frozen=True)
class CreateOrderParams:
    service: str
    link: str
    quantity: int
    runs: Optional[int] = None
    interval: Optional[int] = None


@dataclass(frozen=True)
class ProviderOrder:
    order_id: str
    status: OrderStatus
    start_count: Optional[int] = None
    remains: Optional[int] = None
    charge: Optional[float] = None


@dataclass(frozen=True)
class BalanceResult:
    """
    Advisory vendor balance.

    ``value`` is None when the vendor could not be asked; callers check
    ``known`` instead of catching exceptions.
    """
    value: Optional[float] = None

    @property
    def known(self) -> bool:
        return self.value is not None

    @classmethod
    def unknown(cls) -> "BalanceResult":
        return cls(value=None)
