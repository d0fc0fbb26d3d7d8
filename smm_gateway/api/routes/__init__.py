from smm_gateway.api.routes.health import health_router
from smm_gateway.api.routes.webhooks import webhook_router

__all__ = ["health_router", "webhook_router"]
