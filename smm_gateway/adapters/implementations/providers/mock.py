"""Mock fulfillment vendor for exercising higher layers without a live panel."""

import time
from typing import List

from smm_gateway.adapters.interfaces.provider import ProviderAdapter
from smm_gateway.domain.models.provider import (
    BalanceResult,
    CreateOrderParams,
    OrderStatus,
    ProviderOrder,
    ProviderService,
    ProviderType,
)

MOCK_CATALOG = (
    ProviderService(
        id="1",
        name="Instagram Followers",
        category="Instagram",
        rate=0.5,
        min=100,
        max=10000,
        description="High quality Instagram followers",
    ),
    ProviderService(
        id="2",
        name="TikTok Likes",
        category="TikTok",
        rate=0.3,
        min=100,
        max=50000,
        description="Real TikTok likes",
    ),
    ProviderService(
        id="3",
        name="YouTube Views",
        category="YouTube",
        rate=0.8,
        min=100,
        max=100000,
        description="Organic YouTube views",
    ),
)


class MockProviderAdapter(ProviderAdapter):
    name = "Mock Provider"
    type = ProviderType.REST_JSON

    async def get_services(self) -> List[ProviderService]:
        return list(MOCK_CATALOG)

    async def create_order(self, params: CreateOrderParams) -> ProviderOrder:
        del params  # Every mock order costs the same.
        return ProviderOrder(
            order_id=f"mock_{int(time.time() * 1000)}",
            status=OrderStatus.PENDING,
            charge=10.0,
        )

    async def get_order_status(self, order_id: str) -> ProviderOrder:
        return ProviderOrder(
            order_id=order_id,
            status=OrderStatus.COMPLETED,
            start_count=100,
            remains=0,
            charge=10.0,
        )

    async def get_balance(self) -> BalanceResult:
        return BalanceResult(value=1000.0)

    async def test_connection(self) -> bool:
        return True
