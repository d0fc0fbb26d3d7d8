from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from enum import Enum


class HttpMethod(str, Enum):
    """Enum defining supported HTTP methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class APIConnector(ABC):
    """
    Abstract base interface for vendor connectors.

    A connector owns transport concerns only: headers, the per-call time
    bound, and translating transport failures into gateway exceptions.
    Interpreting the payload is left to the adapter.
    """

    @abstractmethod
    async def request(
        self,
        method: HttpMethod,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Makes a single bounded HTTP request and returns the decoded JSON body.

        Args:
            method: HTTP method to use
            url: Absolute URL to call
            params: Optional query parameters
            json: Optional JSON-serializable body
            content: Optional pre-serialized body; takes precedence over ``json``
            headers: Optional per-call headers merged over the defaults

        Returns:
            Any: Decoded JSON response

        Raises:
            UpstreamTimeoutError: If the call exceeds the configured bound
            UpstreamConnectionError: If no response was received
            UpstreamProtocolError: If the response is non-2xx or not JSON
        """
        pass

    @staticmethod
    def build_url(base_url: str, path: str) -> str:
        """
        Builds a complete URL from a base URL and a resource path.

        Args:
            base_url: The base URL of the API
            path: The path to the specific resource

        Returns:
            str: The complete URL
        """
        return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
