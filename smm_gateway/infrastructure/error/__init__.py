"""
Error handling package for the SMM Gateway.
Provides centralized error categorization and logging for adapter boundaries.
"""

from smm_gateway.infrastructure.error.handler import (
    ErrorHandler,
    ErrorDetails,
    ErrorCategory,
    ErrorSeverity
)

__all__ = [
    "ErrorHandler",
    "ErrorDetails",
    "ErrorCategory",
    "ErrorSeverity",
]
