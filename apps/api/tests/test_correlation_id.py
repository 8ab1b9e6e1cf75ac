from __future__ import annotations

import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.dependencies import build_configuration_registry, build_module_registry
from app.core.events import InternalEvent
from app.context import get_correlation_id
from app.main import app


@pytest.fixture(autouse=True)
def clear_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app.state.configuration_registry = build_configuration_registry()
    app.state.module_registry = build_module_registry()
    with TestClient(app) as test_client:
        yield test_client


def test_generated_correlation_id_returned_in_header(client: TestClient) -> None:
    response = client.get("/api/config/templates")
    assert response.status_code == 200
    header_value = response.headers.get("x-correlation-id")
    assert header_value
    assert uuid.UUID(header_value)
    assert response.headers.get("x-request-id") == header_value


def test_correlation_id_respected_when_provided(client: TestClient) -> None:
    response = client.get("/api/config/classifications/9", headers={"X-Correlation-Id": "abc-123"})
    assert response.status_code == 400
    assert response.headers.get("x-correlation-id") == "abc-123"
    assert response.headers.get("x-request-id") == "abc-123"


def test_request_id_used_when_correlation_id_missing(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-Id": "req-77"})
    assert response.status_code == 200
    assert response.headers.get("x-correlation-id") == "req-77"


def test_module_event_listeners_see_request_correlation_id(client: TestClient) -> None:
    seen: list[str | None] = []

    def listener(event: InternalEvent) -> None:
        seen.append(get_correlation_id())

    app.state.module_registry.on("module:activated", listener)

    response = client.post(
        "/api/modules/tenants/tenant-1/activate",
        json={"module_keys": ["job_costing"]},
        headers={"X-Correlation-Id": "corr-event-1"},
    )

    assert response.status_code == 200
    assert seen == ["corr-event-1"]
