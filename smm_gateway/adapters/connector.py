import asyncio
import time
from typing import Any, Dict, Optional

import httpx

from smm_gateway.adapters.interfaces.connector import APIConnector, HttpMethod
from smm_gateway.core.exceptions import (
    UpstreamConnectionError,
    UpstreamProtocolError,
    UpstreamTimeoutError,
)
from smm_gateway.core.logging import get_logger

logger = get_logger(__name__)


class HttpConnector(APIConnector):
    """
    httpx-backed connector with a hard per-call time bound.

    Every request runs inside its own ``AsyncClient`` context so that a
    cancelled call closes its connection instead of leaving it checked out.
    """

    def __init__(
        self,
        vendor: str,
        timeout: float,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the connector.

        Args:
            vendor: Vendor name used in errors and logs
            timeout: Bound for a whole request, in seconds
            headers: Default headers sent with every request
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.vendor = vendor
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.transport = transport

    async def request(
        self,
        method: HttpMethod,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        merged_headers = {**self.headers, **(headers or {})}
        start_time = time.time()

        try:
            result = await asyncio.wait_for(
                self._send(method, url, params, json, content, merged_headers),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError(
                detail=f"{self.vendor} did not respond within {self.timeout}s",
                vendor=self.vendor,
                timeout=self.timeout,
            )

        logger.debug(
            f"{self.vendor} request completed in {time.time() - start_time:.2f}s",
            extra={"data": {"vendor": self.vendor, "method": str(method.value)}}
        )
        return result

    async def _send(
        self,
        method: HttpMethod,
        url: str,
        params: Optional[Dict[str, Any]],
        json: Optional[Any],
        content: Optional[bytes],
        headers: Dict[str, str],
    ) -> Any:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
        ) as client:
            try:
                response = await client.request(
                    method.value,
                    url,
                    params=params,
                    json=json if content is None else None,
                    content=content,
                    headers=headers,
                )
            except httpx.TimeoutException:
                raise UpstreamTimeoutError(
                    detail=f"{self.vendor} did not respond within {self.timeout}s",
                    vendor=self.vendor,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                raise UpstreamConnectionError(
                    detail=f"Could not reach {self.vendor}",
                    vendor=self.vendor,
                    original_exception=e,
                )

            if response.is_error:
                raise UpstreamProtocolError(
                    detail=f"{self.vendor} API error: {response.status_code} {response.reason_phrase}",
                    vendor=self.vendor,
                    http_status=response.status_code,
                )

            try:
                return response.json()
            except ValueError as e:
                raise UpstreamProtocolError(
                    detail=f"{self.vendor} returned a non-JSON body",
                    vendor=self.vendor,
                    http_status=response.status_code,
                    original_exception=e,
                )
