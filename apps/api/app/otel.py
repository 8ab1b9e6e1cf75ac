from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from app.core.config import Settings, get_settings


SERVICE_NAME = "crm-config-api"

_provider: TracerProvider | None = None
_console_exporter_attached = False


def tracer_provider(settings: Settings | None = None) -> TracerProvider:
    """Install the SDK provider on first use; the global provider can only be set once."""
    global _provider

    if _provider is None:
        settings = settings or get_settings()
        _provider = TracerProvider(
            resource=Resource.create(
                {
                    "service.name": SERVICE_NAME,
                    "service.version": settings.app_version,
                    "deployment.environment": settings.app_env,
                }
            )
        )
        trace.set_tracer_provider(_provider)
    return _provider


def configure_tracing(settings: Settings) -> TracerProvider | None:
    global _console_exporter_attached

    if not settings.otel_enabled:
        return None

    provider = tracer_provider(settings)
    if settings.otel_console_exporter and not _console_exporter_attached:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        _console_exporter_attached = True
    return provider


def attach_inmemory_exporter() -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    tracer_provider().add_span_processor(SimpleSpanProcessor(exporter))
    return exporter
