from abc import ABC, abstractmethod
from typing import List, Mapping, Optional

from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.provider import (
    BalanceResult,
    CreateOrderParams,
    OrderStatus,
    ProviderOrder,
    ProviderService,
    ProviderType,
)

logger = get_logger(__name__)


def normalize_order_status(
    raw_status: Optional[str],
    table: Mapping[str, OrderStatus],
) -> OrderStatus:
    """
    Translates a vendor status string through ``table``.

    Strings missing from the table become PENDING so that status polling
    keeps going when a vendor invents a new state.
    """
    if not isinstance(raw_status, str):
        return OrderStatus.PENDING
    status = table.get(raw_status)
    if status is None:
        logger.debug(f"Unmapped vendor order status '{raw_status}', treating as pending")
        return OrderStatus.PENDING
    return status


class ProviderAdapter(ABC):
    """
    Abstract base interface for fulfillment vendor adapters.

    Ordering calls (services, create, status) raise typed gateway exceptions
    on failure. Advisory calls (balance, connection test) never raise.
    """

    name: str
    type: ProviderType

    @abstractmethod
    async def get_services(self) -> List[ProviderService]:
        """
        Fetches the vendor catalog.

        Returns:
            List[ProviderService]: Catalog entries with the vendor rate multiplier applied

        Raises:
            UpstreamProtocolError: If the vendor does not return a list of services
            UpstreamTimeoutError: If the vendor exceeds the configured timeout
        """
        pass

    @abstractmethod
    async def create_order(self, params: CreateOrderParams) -> ProviderOrder:
        """
        Places one fulfillment order at the vendor.

        The order cannot be rolled back through this adapter once created.

        Args:
            params: Vendor service id, target link, quantity and optional drip-feed fields

        Returns:
            ProviderOrder: Vendor order id with status PENDING and any reported charge
        """
        pass

    @abstractmethod
    async def get_order_status(self, order_id: str) -> ProviderOrder:
        """
        Polls the vendor for the current state of an order.

        Args:
            order_id: Vendor-assigned order id

        Returns:
            ProviderOrder: Order with a normalized status
        """
        pass

    @abstractmethod
    async def get_balance(self) -> BalanceResult:
        """
        Returns remaining vendor credit, or an unknown result if the vendor
        could not be asked. Never raises.
        """
        pass

    async def test_connection(self) -> bool:
        """
        Health check: True when the vendor answered a balance request.

        Returns:
            bool: Whether the vendor is reachable with the configured credentials
        """
        try:
            balance = await self.get_balance()
        except Exception as e:
            logger.warning(f"Connection test for {self.name} failed: {str(e)}")
            return False
        return balance.known
