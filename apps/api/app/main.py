from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.core.config import get_settings
from app.core.dependencies import build_configuration_registry, build_module_registry
from app.core.events import InternalEvent
from app.logging import configure_logging
from app.middleware.request_context import RequestContextMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware
from app.modules.registry import MODULE_ACTIVATED, MODULE_DEACTIVATED
from app.otel import configure_tracing


settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("app.lifecycle")

_module_event_types = [MODULE_ACTIVATED, MODULE_DEACTIVATED]


def _on_module_event(event: InternalEvent) -> None:
    logger.info(
        "module.event",
        extra={
            "event_type": event.name,
            "module_key": event.payload.get("module_key"),
            "tenant_id": event.payload.get("tenant_id"),
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    module_registry = app.state.module_registry
    for event_name in _module_event_types:
        module_registry.on(event_name, _on_module_event)
    logger.info("system.started", extra={"module_keys": [module.key for module in module_registry.get_all_modules()]})
    try:
        yield
    finally:
        for event_name in _module_event_types:
            module_registry.off(event_name, _on_module_event)


configure_tracing(settings)

app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
app.state.configuration_registry = build_configuration_registry(settings)
app.state.module_registry = build_module_registry(settings)
# Last added runs first: request context wraps request logging.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestContextMiddleware)
app.include_router(api_router)
