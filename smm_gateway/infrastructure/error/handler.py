"""
Error handling module for the SMM Gateway.
Categorizes failures caught at adapter boundaries and logs them with vendor context.
"""
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from smm_gateway.core.exceptions import (
    ConfigurationError,
    PaymentValidationError,
    UpstreamConnectionError,
    UpstreamProtocolError,
    UpstreamTimeoutError,
)


class ErrorCategory(str, Enum):
    """Categorization of errors for processing and reporting."""
    PROTOCOL = "protocol"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorDetails(BaseModel):
    """Structured error details for consistency in logging."""
    timestamp: datetime
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    source: str
    error_code: Optional[str] = None
    http_status_code: Optional[int] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    stacktrace: Optional[str] = None


class ErrorHandler:
    """
    Boundary error processor shared by the vendor adapters.

    It does not decide on retries; that policy belongs to callers.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize the error handler.

        Args:
            logger: Logger instance for error logging
        """
        self.logger = logger

        # Checked in order, so subclasses come before their bases
        self.exception_map = (
            (UpstreamTimeoutError, ErrorCategory.TIMEOUT, ErrorSeverity.MEDIUM),
            (UpstreamConnectionError, ErrorCategory.CONNECTION, ErrorSeverity.MEDIUM),
            (UpstreamProtocolError, ErrorCategory.PROTOCOL, ErrorSeverity.HIGH),
            (ConfigurationError, ErrorCategory.CONFIGURATION, ErrorSeverity.HIGH),
            (PaymentValidationError, ErrorCategory.VALIDATION, ErrorSeverity.LOW),
        )

    def handle_error(
        self,
        exception: Exception,
        source: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorDetails:
        """
        Categorize and log an error.

        Args:
            exception: The exception that occurred
            source: Source identifier (e.g., "korapay", "provider:Acme Panel")
            context: Additional context about the error

        Returns:
            ErrorDetails: Structured details about the error
        """
        error_details = self.categorize_error(exception, source, context or {})
        self.log_error(error_details)
        return error_details

    def categorize_error(
        self,
        exception: Exception,
        source: str,
        context: Dict[str, Any],
    ) -> ErrorDetails:
        category = ErrorCategory.UNKNOWN
        severity = ErrorSeverity.MEDIUM

        for exception_type, mapped_category, mapped_severity in self.exception_map:
            if isinstance(exception, exception_type):
                category, severity = mapped_category, mapped_severity
                break

        http_status_code = getattr(exception, "http_status", None)
        if http_status_code is not None and http_status_code >= 500:
            severity = ErrorSeverity.HIGH

        return ErrorDetails(
            timestamp=datetime.now(timezone.utc),
            category=category,
            severity=severity,
            message=str(exception),
            source=source,
            error_code=getattr(exception, "code", None),
            http_status_code=http_status_code,
            context=context,
            stacktrace=traceback.format_exc() if category == ErrorCategory.UNKNOWN else None,
        )

    def log_error(self, error_details: ErrorDetails) -> None:
        """
        Log error details at the appropriate level.

        Args:
            error_details: Structured error information
        """
        log_data = {
            "category": error_details.category.value,
            "severity": error_details.severity.value,
            "source": error_details.source,
        }

        if error_details.error_code:
            log_data["error_code"] = error_details.error_code

        if error_details.http_status_code:
            log_data["http_status_code"] = error_details.http_status_code

        if error_details.context:
            log_data["context"] = error_details.context

        message = f"{error_details.source}: {error_details.message}"

        if error_details.severity == ErrorSeverity.HIGH:
            self.logger.error(message, extra={"data": log_data})
            if error_details.stacktrace:
                self.logger.error(f"Stacktrace:\n{error_details.stacktrace}")
        elif error_details.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(message, extra={"data": log_data})
        else:
            self.logger.info(message, extra={"data": log_data})
