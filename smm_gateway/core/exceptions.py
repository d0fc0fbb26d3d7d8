from fastapi import status
from typing import Any, Dict, Optional


class GatewayException(Exception):
    """
    Base exception for gateway errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class UpstreamError(GatewayException):
    """Exception raised when a call to an upstream vendor fails."""

    def __init__(
        self,
        detail: str = "Upstream vendor error",
        code: str = "upstream_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        vendor: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        merged_context = {"vendor": vendor} if vendor else {}
        if context:
            merged_context.update(context)

        super().__init__(status_code=status_code, detail=detail, code=code, context=merged_context)
        self.vendor = vendor
        self.original_exception = original_exception

        if original_exception is not None:
            self.context["original_error"] = str(original_exception)


class UpstreamProtocolError(UpstreamError):
    """The vendor answered, but not with something we can interpret."""

    def __init__(
        self,
        detail: str = "Unexpected response from upstream vendor",
        vendor: Optional[str] = None,
        http_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        merged_context = {"http_status": http_status} if http_status is not None else {}
        if context:
            merged_context.update(context)

        super().__init__(
            detail=detail,
            code="upstream_protocol_error",
            vendor=vendor,
            context=merged_context,
            original_exception=original_exception
        )
        self.http_status = http_status


class UpstreamTimeoutError(UpstreamError):
    """The vendor call exceeded its configured bound and was cancelled."""

    def __init__(
        self,
        detail: str = "Upstream vendor timed out",
        vendor: Optional[str] = None,
        timeout: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"timeout_seconds": timeout} if timeout is not None else {}
        if context:
            merged_context.update(context)

        super().__init__(
            detail=detail,
            code="upstream_timeout",
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            vendor=vendor,
            context=merged_context
        )
        self.timeout = timeout


class UpstreamConnectionError(UpstreamError):
    """Transport failure before any vendor response was received."""

    def __init__(
        self,
        detail: str = "Could not reach upstream vendor",
        vendor: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            detail=detail,
            code="upstream_connection_error",
            vendor=vendor,
            context=context,
            original_exception=original_exception
        )


class ConfigurationError(GatewayException):
    """Exception raised when configuration references something we cannot build."""

    def __init__(
        self,
        detail: str = "Invalid configuration",
        code: str = "configuration_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, code=code, context=context)


class UnsupportedProviderTypeError(ConfigurationError):
    """Exception raised when no adapter exists for a provider type."""

    def __init__(self, provider_type: Any, detail: Optional[str] = None):
        type_value = getattr(provider_type, "value", provider_type)
        if detail is None:
            detail = f"Unsupported provider type: {type_value}"

        super().__init__(
            detail=detail,
            code="unsupported_provider_type",
            context={"provider_type": str(type_value)}
        )
        self.provider_type = type_value


class AdapterNotFoundError(ConfigurationError):
    """Exception raised when a payment adapter name is not registered."""

    def __init__(self, name: str, detail: Optional[str] = None):
        if detail is None:
            detail = f"Payment adapter not found for provider: {name}"

        super().__init__(
            detail=detail,
            code="adapter_not_found",
            status_code=status.HTTP_404_NOT_FOUND,
            context={"provider": name}
        )
        self.name = name


class PaymentValidationError(GatewayException):
    """Exception raised when a payment rail rejects caller input before any call."""

    def __init__(
        self,
        detail: str = "Invalid payment request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"field": field} if field else {}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            code="payment_validation_error",
            context=merged_context
        )


class WebhookVerificationError(GatewayException):
    """Raised by the HTTP surface when an inbound webhook fails signature checks."""

    def __init__(
        self,
        provider: str,
        detail: str = "Invalid webhook signature"
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            code="webhook_verification_failed",
            context={"provider": provider}
        )
