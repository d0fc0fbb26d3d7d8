from fastapi import Request
from fastapi.responses import JSONResponse

from smm_gateway.core.exceptions import GatewayException, UpstreamError
from smm_gateway.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)

SENSITIVE_CONTEXT_KEYS = ("api_key", "secret_key", "auth_token", "signature")


def redact_context(context: dict) -> dict:
    safe_context = dict(context or {})
    for key in SENSITIVE_CONTEXT_KEYS:
        if key in safe_context:
            safe_context[key] = "[REDACTED]"
    return safe_context


async def handle_gateway_exception(request: Request, exc: GatewayException) -> JSONResponse:
    """
    Handle GatewayException instances.

    Args:
        request: FastAPI request object
        exc: GatewayException instance

    Returns:
        JSONResponse: Formatted error response
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"Request failed: {exc.detail}",
        extra={"data": {
            "request_path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.code,
        }}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.detail,
                "status_code": exc.status_code,
                "context": redact_context(exc.context),
            }
        }
    )


async def handle_upstream_exception(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    Handle vendor call failures.

    The original error text stays in the logs and is dropped from the response.

    Args:
        request: FastAPI request object
        exc: UpstreamError instance

    Returns:
        JSONResponse: Formatted upstream error response
    """
    logger.error(
        f"Upstream error: {exc.detail}",
        extra={"data": {
            "request_path": request.url.path,
            "vendor": exc.vendor,
            "original_error": exc.context.get("original_error"),
        }}
    )

    safe_context = redact_context(exc.context)
    safe_context.pop("original_error", None)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.detail,
                "status_code": exc.status_code,
                "context": safe_context,
            }
        }
    )
