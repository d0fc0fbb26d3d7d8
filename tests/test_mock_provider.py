"""Tests for the mock fulfillment vendor."""

import pytest

from smm_gateway.adapters import create_mock_provider
from smm_gateway.domain.models.provider import CreateOrderParams, OrderStatus


@pytest.mark.asyncio
async def test_catalog_has_fixed_entries():
    adapter = create_mock_provider()

    services = await adapter.get_services()

    assert [s.name for s in services] == ["Instagram Followers", "TikTok Likes", "YouTube Views"]
    assert services[0].rate == 0.5
    assert services[2].max == 100000


@pytest.mark.asyncio
async def test_create_order_is_pending_with_fixed_charge():
    adapter = create_mock_provider()

    order = await adapter.create_order(CreateOrderParams(service="1", link="https://x.test", quantity=100))

    assert order.order_id.startswith("mock_")
    assert order.status == OrderStatus.PENDING
    assert order.charge == 10.0


@pytest.mark.asyncio
async def test_status_is_always_completed():
    adapter = create_mock_provider()

    order = await adapter.get_order_status("mock_1")

    assert order.order_id == "mock_1"
    assert order.status == OrderStatus.COMPLETED
    assert order.start_count == 100
    assert order.remains == 0


@pytest.mark.asyncio
async def test_balance_and_connection():
    adapter = create_mock_provider()

    assert (await adapter.get_balance()).value == 1000.0
    assert await adapter.test_connection() is True
