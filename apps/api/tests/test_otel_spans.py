from __future__ import annotations

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

os.environ.setdefault("OTEL_ENABLED", "true")

from app.core.config import get_settings
from app.core.dependencies import build_configuration_registry, build_module_registry
from app.main import app
from app.otel import attach_inmemory_exporter


@pytest.fixture(autouse=True)
def setup_env() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def span_exporter() -> InMemorySpanExporter:
    exporter = attach_inmemory_exporter()
    exporter.clear()
    return exporter


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app.state.configuration_registry = build_configuration_registry()
    app.state.module_registry = build_module_registry()
    with TestClient(app) as test_client:
        yield test_client


def test_resolution_span_contains_classification_and_correlation(
    client: TestClient,
    span_exporter: InMemorySpanExporter,
) -> None:
    response = client.get(
        "/api/config/resolve",
        params={"classification_code": "238160"},
        headers={"X-Correlation-Id": "otel-corr-1"},
    )
    assert response.status_code == 200

    spans = [span for span in span_exporter.get_finished_spans() if span.name == "config.build_for_classification"]
    assert spans
    assert any(
        span.attributes.get("classification_code") == "238160"
        and span.attributes.get("template") == "PROJECT_BASED"
        and span.attributes.get("source_count") == 1
        and span.attributes.get("correlation_id") == "otel-corr-1"
        for span in spans
    )


def test_activation_span_contains_tenant_and_correlation(
    client: TestClient,
    span_exporter: InMemorySpanExporter,
) -> None:
    response = client.post(
        "/api/modules/tenants/otel-tenant/activate",
        json={"module_keys": ["job_costing"]},
        headers={"X-Correlation-Id": "otel-job-corr-1"},
    )
    assert response.status_code == 200

    spans = [span for span in span_exporter.get_finished_spans() if span.name == "modules.activate_for_tenant"]
    assert spans
    assert any(
        span.attributes.get("tenant_id") == "otel-tenant"
        and tuple(span.attributes.get("module_keys", ())) == ("job_costing",)
        and span.attributes.get("correlation_id") == "otel-job-corr-1"
        for span in spans
    )


def test_deactivation_span(client: TestClient, span_exporter: InMemorySpanExporter) -> None:
    client.post("/api/modules/tenants/otel-tenant/activate", json={"module_keys": ["job_costing"]})

    response = client.post("/api/modules/tenants/otel-tenant/deactivate", json={"module_key": "job_costing"})
    assert response.status_code == 200

    spans = [span for span in span_exporter.get_finished_spans() if span.name == "modules.deactivate_for_tenant"]
    assert any(span.attributes.get("module_key") == "job_costing" for span in spans)
