from __future__ import annotations

import re

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

config_resolutions_total = Counter(
    "config_resolutions_total",
    "Total merged configuration resolutions by template",
    ["template", "source"],
)

config_resolution_duration_seconds = Histogram(
    "config_resolution_duration_seconds",
    "Configuration resolution duration in seconds",
    ["source"],
)

module_activations_total = Counter(
    "module_activations_total",
    "Total module activation attempts by outcome",
    ["module_key", "outcome"],
)

module_deactivations_total = Counter(
    "module_deactivations_total",
    "Total module deactivation attempts by outcome",
    ["module_key", "outcome"],
)


_DIGITS_RE = re.compile(r"/\d+\b")


def _sanitize_path(path: str) -> str:
    return _DIGITS_RE.sub("/{id}", path)


def resolve_http_path_label(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        path_format = getattr(route, "path_format", None)
        if isinstance(path_format, str) and path_format:
            return path_format
        route_path = getattr(route, "path", None)
        if isinstance(route_path, str) and route_path:
            return route_path
    return _sanitize_path(request.url.path)


def observe_http_request(method: str, path: str, status: int, duration: float) -> None:
    status_str = str(status)
    http_requests_total.labels(method=method, path=path, status=status_str).inc()
    http_request_duration_seconds.labels(method=method, path=path).observe(duration)


def observe_config_resolution(template: str, source: str, duration: float) -> None:
    config_resolutions_total.labels(template=template, source=source).inc()
    config_resolution_duration_seconds.labels(source=source).observe(duration)


UNKNOWN_MODULE_LABEL = "unknown"


def observe_module_activation(module_key: str, success: bool) -> None:
    module_activations_total.labels(module_key=module_key, outcome="success" if success else "failure").inc()


def observe_module_deactivation(module_key: str, success: bool) -> None:
    module_deactivations_total.labels(module_key=module_key, outcome="success" if success else "failure").inc()


def generate_metrics_payload() -> bytes:
    return generate_latest()


def metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
