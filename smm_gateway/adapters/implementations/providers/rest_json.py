from typing import Any, Dict, List, Optional

import httpx

from smm_gateway.adapters.connector import HttpConnector
from smm_gateway.adapters.interfaces.connector import HttpMethod
from smm_gateway.adapters.interfaces.provider import ProviderAdapter, normalize_order_status
from smm_gateway.core.exceptions import UpstreamError, UpstreamProtocolError
from smm_gateway.core.logging import get_logger
from smm_gateway.domain.models.provider import (
    BalanceResult,
    CreateOrderParams,
    OrderStatus,
    ProviderConfig,
    ProviderOrder,
    ProviderService,
    ProviderType,
)
from smm_gateway.infrastructure.error.handler import ErrorHandler

logger = get_logger(__name__)

# Vendor status string -> normalized status
ORDER_STATUS_MAP: Dict[str, OrderStatus] = {
    "Pending": OrderStatus.PENDING,
    "In progress": OrderStatus.PROCESSING,
    "Processing": OrderStatus.PROCESSING,
    "Partial": OrderStatus.PARTIAL,
    "Completed": OrderStatus.COMPLETED,
    "Canceled": OrderStatus.CANCELED,
    "Refunded": OrderStatus.REFUNDED,
}

DEFAULT_ACTIONS: Dict[str, str] = {
    "services": "services",
    "order": "add",
    "status": "status",
}


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


class RestJsonProviderAdapter(ProviderAdapter):
    """
    Generic adapter for panel-style REST APIs.

    Every call is a POST to the vendor's base URL with ``key`` and ``action``
    (plus action fields) in the query string, answered with JSON.
    """

    type = ProviderType.REST_JSON

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the adapter for one vendor.

        Args:
            config: Vendor connection record
            transport: Optional httpx transport, used by tests
        """
        self.config = config
        self.name = config.name
        self.connector = HttpConnector(
            vendor=config.name,
            timeout=config.timeout_seconds,
            headers={"Content-Type": "application/json", **config.extra_headers},
            transport=transport,
        )
        self.error_handler = ErrorHandler(logger)

    def _action(self, key: str) -> str:
        mapping = self.config.meta.mapping if self.config.meta else None
        override = getattr(mapping, key, None) if mapping else None
        return override or DEFAULT_ACTIONS[key]

    async def _make_request(self, action: str, params: Optional[Dict[str, Any]] = None) -> Any:
        query = {"key": self.config.api_key, "action": action}
        for field_name, value in (params or {}).items():
            query[field_name] = str(value)

        return await self.connector.request(HttpMethod.POST, self.config.base_url, params=query)

    def _log_failure(self, error: Exception, operation: str, **context: Any) -> None:
        self.error_handler.handle_error(
            error,
            source=f"provider:{self.name}",
            context={"provider_id": self.config.id, "operation": operation, **context},
        )

    def _raise_on_vendor_error(self, data: Any, operation: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise UpstreamProtocolError(
                detail=f"Invalid response format for {operation}: expected an object",
                vendor=self.name,
            )
        if data.get("error"):
            raise UpstreamProtocolError(
                detail=f"{self.name} rejected {operation}: {data['error']}",
                vendor=self.name,
                context={"vendor_error": str(data["error"])},
            )
        return data

    def _to_service(self, raw: Any) -> ProviderService:
        try:
            return ProviderService(
                id=str(raw["service"]),
                name=str(raw["name"]),
                category=raw.get("category") or "Other",
                rate=float(raw["rate"]) * self.config.rate_multiplier,
                min=int(float(raw["min"])),
                max=int(float(raw["max"])),
                description=raw.get("description"),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamProtocolError(
                detail=f"Malformed service entry from {self.name}",
                vendor=self.name,
                original_exception=e,
            )

    async def get_services(self) -> List[ProviderService]:
        try:
            data = await self._make_request(self._action("services"))

            if not isinstance(data, list):
                raise UpstreamProtocolError(
                    detail="Invalid response format: expected a list of services",
                    vendor=self.name,
                )

            services = [self._to_service(item) for item in data]
        except UpstreamError as e:
            self._log_failure(e, "get_services")
            raise

        logger.debug(f"Fetched {len(services)} services from {self.name}")
        return services

    async def create_order(self, params: CreateOrderParams) -> ProviderOrder:
        fields: Dict[str, Any] = {
            "service": params.service,
            "link": params.link,
            "quantity": params.quantity,
        }
        if params.runs:
            fields["runs"] = params.runs
        if params.interval:
            fields["interval"] = params.interval

        try:
            data = self._raise_on_vendor_error(
                await self._make_request(self._action("order"), fields),
                "create_order",
            )
            if data.get("order") is None:
                raise UpstreamProtocolError(
                    detail=f"{self.name} did not return an order id",
                    vendor=self.name,
                )
        except UpstreamError as e:
            self._log_failure(e, "create_order", service=params.service, quantity=params.quantity)
            raise

        order = ProviderOrder(
            order_id=str(data["order"]),
            status=OrderStatus.PENDING,
            charge=_to_float(data.get("charge")),
        )
        logger.info(
            f"Created order {order.order_id} at {self.name}",
            extra={"data": {"vendor": self.name, "service": params.service, "quantity": params.quantity}}
        )
        return order

    async def get_order_status(self, order_id: str) -> ProviderOrder:
        try:
            data = self._raise_on_vendor_error(
                await self._make_request(self._action("status"), {"order": order_id}),
                "get_order_status",
            )
        except UpstreamError as e:
            self._log_failure(e, "get_order_status", order_id=order_id)
            raise

        return ProviderOrder(
            order_id=str(data.get("order", order_id)),
            status=normalize_order_status(data.get("status"), ORDER_STATUS_MAP),
            start_count=_to_int(data.get("start_count")),
            remains=_to_int(data.get("remains")),
            charge=_to_float(data.get("charge")),
        )

    async def get_balance(self) -> BalanceResult:
        try:
            data = await self._make_request("balance")
        except Exception as e:
            self._log_failure(e, "get_balance")
            return BalanceResult.unknown()

        balance = _to_float(data.get("balance")) if isinstance(data, dict) else None
        if balance is None:
            logger.warning(
                f"{self.name} returned no usable balance",
                extra={"data": {"vendor": self.name, "provider_id": self.config.id}}
            )
            return BalanceResult.unknown()

        return BalanceResult(value=balance)
