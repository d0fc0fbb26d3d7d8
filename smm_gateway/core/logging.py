import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from smm_gateway.core.config import get_settings

# Set per inbound request by the HTTP middleware; empty outside a request
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s"

# Chatty at INFO: one line per vendor call or per request
QUIET_LOGGERS = ("httpx", "uvicorn.access")


class StructuredLogFormatter(logging.Formatter):
    """
    One JSON object per record.

    Vendor and payment context passed as ``extra={"data": {...}}`` is merged
    into the top level, so ``vendor``, ``provider_id`` or ``payment_id`` can
    be filtered on directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        corr_id = getattr(record, "correlation_id", "") or correlation_id.get()
        if corr_id:
            entry["correlation_id"] = corr_id

        data = getattr(record, "data", None)
        if isinstance(data, dict):
            entry.update(data)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ContextFilter(logging.Filter):
    """Copies the request's correlation ID onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get()
        return True


def configure_logging() -> None:
    """
    Install a single stdout handler on the root logger.

    ``ENABLE_STRUCTURED_LOGGING`` picks JSON lines or a plain one-line format;
    ``LOG_LEVEL`` sets the root level.
    """
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter())
    if settings.ENABLE_STRUCTURED_LOGGING:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger carrying the correlation ID filter (added once)."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, ContextFilter) for f in logger.filters):
        logger.addFilter(ContextFilter())
    return logger


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """
    Bind a correlation ID to the current context.

    Args:
        corr_id: ID taken from the inbound request; a UUID4 is generated when None

    Returns:
        str: The ID now in effect
    """
    corr_id = corr_id or str(uuid.uuid4())
    correlation_id.set(corr_id)
    return corr_id
