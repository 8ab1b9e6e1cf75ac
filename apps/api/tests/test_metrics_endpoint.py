from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.dependencies import build_configuration_registry, build_module_registry
from app.main import app


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("METRICS_ENABLED", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app.state.configuration_registry = build_configuration_registry()
    app.state.module_registry = build_module_registry()
    with TestClient(app) as test_client:
        yield test_client


def test_metrics_endpoint_exposes_http_config_and_module_metrics(client: TestClient) -> None:
    health = client.get("/health")
    assert health.status_code == 200

    resolved = client.get("/api/config/resolve", params={"classification_code": "238160"})
    assert resolved.status_code == 200

    activated = client.post("/api/modules/tenants/metrics-tenant/activate", json={"module_keys": ["job_costing"]})
    assert activated.status_code == 200

    rejected = client.post("/api/modules/tenants/metrics-tenant/activate", json={"module_keys": ["nope"]})
    assert rejected.status_code == 400

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    body = metrics.text

    assert "http_requests_total" in body
    assert "http_request_duration_seconds" in body
    assert "config_resolutions_total" in body
    assert "config_resolution_duration_seconds" in body
    assert "module_activations_total" in body

    assert 'path="/health"' in body
    assert 'path="/api/modules/tenants/{tenant_id}/activate"' in body
    assert 'template="PROJECT_BASED"' in body
    assert 'module_key="job_costing",outcome="success"' in body
    assert 'module_key="unknown",outcome="failure"' in body
    assert 'module_key="nope"' not in body


def test_metrics_endpoint_disabled_by_default(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METRICS_ENABLED", "false")
    get_settings.cache_clear()

    response = client.get("/metrics")

    assert response.status_code == 404
