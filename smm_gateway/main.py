from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import time
import uuid
from typing import Callable

from smm_gateway import __version__
from smm_gateway.api.error_handlers import handle_gateway_exception, handle_upstream_exception
from smm_gateway.core.config import get_settings, load_env_file
from smm_gateway.core.exceptions import GatewayException, UpstreamError
from smm_gateway.core.logging import configure_logging, get_logger, set_correlation_id


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=__version__,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        debug=settings.DEBUG
    )

    configure_middleware(app)
    handle_exceptions(app)
    register_routers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting up SMM Gateway")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down SMM Gateway")

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            extra={"data": {
                "request_path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2)
            }}
        )
        return response


def handle_exceptions(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Starlette resolves handlers by MRO, so the narrower class wins
    app.add_exception_handler(UpstreamError, handle_upstream_exception)
    app.add_exception_handler(GatewayException, handle_gateway_exception)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        errors = [
            {"loc": error["loc"], "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": {
                    "code": "validation_error",
                    "message": "Request validation error",
                    "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                    "context": {"errors": errors}
                }
            }
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "internal_server_error",
                    "message": "An unexpected error occurred",
                    "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
                }
            }
        )


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # Import routers here to avoid circular imports
    from smm_gateway.api.routes import health_router, webhook_router

    app.include_router(
        health_router,
        prefix=f"{settings.API_V1_STR}/health",
        tags=["Health"]
    )

    app.include_router(
        webhook_router,
        prefix=f"{settings.API_V1_STR}/webhooks",
        tags=["Webhooks"]
    )


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("smm_gateway.main:app", host="0.0.0.0", port=8000, reload=True)
