"""API tests using FastAPI's TestClient with the store mocked out."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from uptimeboard.exceptions import RegistryUnavailable
from uptimeboard.main import create_app
from uptimeboard.schemas.monitor_type import MonitorTypeDescriptor
from uptimeboard.services.registry import MonitorTypeRegistry
from uptimeboard.services.submitter import MonitorSubmitter
from uptimeboard.store import get_entitlement, get_registry, get_submitter


class FakeStore:
    """Records store requests and answers with queued responses."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str, dict]] = []
        self.responses: list[httpx.Response] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path, json.loads(request.content or b"{}")))
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={"success": True, "id": "mon_1"})


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def client(make_store, fake_store):
    app = create_app()
    submitter = MonitorSubmitter(make_store(fake_store))

    async def catalog():
        return [
            MonitorTypeDescriptor(id="http", name="HTTP(S)"),
            MonitorTypeDescriptor(id="ssl", name="SSL certificate", is_premium=True),
        ]

    registry = MonitorTypeRegistry(fetch=catalog)
    app.dependency_overrides[get_submitter] = lambda: submitter
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_entitlement] = lambda: False
    return TestClient(app)


@pytest.fixture
def http_form(http_fields) -> dict:
    return {
        "name": "Homepage",
        "monitorTypeId": "http",
        "configuration": http_fields,
        "intervalSeconds": "60",
        "alertAfterFailures": "3",
        "alertRecoveryThreshold": "2",
        "severity": "high",
        "tags": "prod, web",
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestMonitorEndpoints:
    def test_validate_returns_payload(self, client, http_form) -> None:
        response = client.post("/api/monitors/validate", json=http_form)
        assert response.status_code == 200
        data = response.json()
        assert data["monitorTypeId"] == "http"
        assert data["configuration"]["url"] == "https://status.example.com/health"
        assert data["configuration"]["verifySSL"] is True
        assert data["interval"]["seconds"] == 60
        assert data["alertPolicy"]["alertAfterFailures"] == 3
        assert data["lifecycle"]["status"] == "pending"
        assert data["tags"] == ["prod", "web"]

    def test_validation_errors(self, client, fake_store) -> None:
        response = client.post(
            "/api/monitors",
            json={
                "name": "",
                "monitorTypeId": "dns",
                "configuration": {"hostname": "example.com", "recordType": "A", "expectedIp": "10.0.0.1,nope"},
            },
        )
        assert response.status_code == 422
        body = response.json()
        assert body["detail"] == "Validation failed"
        fields = [e["field"] for e in body["errors"]]
        assert "configuration.expectedIp.1" in fields
        assert "name" in fields
        assert fake_store.requests == []

    def test_create(self, client, http_form, fake_store) -> None:
        response = client.post("/api/monitors", json=http_form)
        assert response.status_code == 201
        assert response.json()["success"] is True
        assert response.json()["id"] == "mon_1"

        method, path, body = fake_store.requests[0]
        assert (method, path) == ("POST", "/monitors")
        assert body["name"] == "Homepage"
        assert body["alertPolicy"]["severity"] == "high"

    def test_store_rejection(self, client, http_form, fake_store) -> None:
        fake_store.responses.append(
            httpx.Response(200, json={"success": False, "message": "Monitor limit reached"})
        )
        response = client.post("/api/monitors", json=http_form)
        assert response.status_code == 502
        assert response.json() == {"detail": "Monitor limit reached"}

    def test_update(self, client, http_form, fake_store) -> None:
        response = client.put("/api/monitors/mon_9", json=http_form)
        assert response.status_code == 200
        assert fake_store.requests[0][:2] == ("PUT", "/monitors/mon_9")

    def test_toggle_active(self, client, fake_store) -> None:
        response = client.put("/api/monitors/mon_1/active", json={"active": False})
        assert response.status_code == 200
        assert fake_store.requests == [("PUT", "/monitors/mon_1/active", {"active": False})]

    def test_maintenance(self, client, fake_store) -> None:
        response = client.put(
            "/api/monitors/mon_1/maintenance",
            json={"maintenanceMode": True, "maintenanceUntil": "2026-03-01T13:00:00Z"},
        )
        assert response.status_code == 200
        _, path, body = fake_store.requests[0]
        assert path == "/monitors/mon_1/maintenance"
        assert body["maintenanceMode"] is True
        assert body["maintenanceUntil"].startswith("2026-03-01T13:00:00")

    def test_maintenance_naive_end_is_utc(self, client, fake_store) -> None:
        response = client.put(
            "/api/monitors/mon_1/maintenance",
            json={"maintenanceMode": True, "maintenanceUntil": "2026-03-01T13:00:00"},
        )
        assert response.status_code == 200
        assert fake_store.requests[0][2]["maintenanceUntil"] == "2026-03-01T13:00:00+00:00"

    def test_unknown_configuration_key(self, client, http_form, fake_store) -> None:
        http_form["configuration"]["expectedStatus"] = "404"
        response = client.post("/api/monitors", json=http_form)
        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == ["configuration.expectedStatus"]
        assert fake_store.requests == []


class TestEvaluateEndpoint:
    def test_alert_scenario(self, client) -> None:
        response = client.post(
            "/api/monitors/evaluate",
            json={
                "monitorId": "mon_1",
                "alertPolicy": {"alertAfterFailures": 3, "alertRecoveryThreshold": 2},
                "outcomes": ["failure", "failure", "failure", "success", "success"],
                "now": "2026-03-01T12:00:00Z",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["lifecycle"]["status"] == "up"
        assert [e["kind"] for e in data["events"]] == ["alert_raise", "alert_clear"]
        assert data["events"][0]["monitorId"] == "mon_1"

    def test_inactive_monitor_conflict(self, client) -> None:
        response = client.post(
            "/api/monitors/evaluate",
            json={"lifecycle": {"active": False}, "outcomes": ["failure"]},
        )
        assert response.status_code == 409

    def test_unknown_outcome_rejected(self, client) -> None:
        response = client.post("/api/monitors/evaluate", json={"outcomes": ["maybe"]})
        assert response.status_code == 422


class TestMonitorTypeEndpoints:
    def test_list(self, client) -> None:
        response = client.get("/api/monitor-types")
        assert response.status_code == 200
        assert [(t["id"], t["selectable"]) for t in response.json()] == [
            ("http", True),
            ("ssl", False),
        ]

    def test_unavailable_catalog_is_empty(self, client) -> None:
        async def broken():
            raise RegistryUnavailable("store offline")

        client.app.dependency_overrides[get_registry] = lambda: MonitorTypeRegistry(fetch=broken)
        response = client.get("/api/monitor-types")
        assert response.status_code == 200
        assert response.json() == []

    def test_defaults(self, client) -> None:
        response = client.get("/api/monitor-types/port/defaults")
        assert response.status_code == 200
        assert response.json()["port"] == 80

    def test_defaults_unknown_type(self, client) -> None:
        response = client.get("/api/monitor-types/smtp/defaults")
        assert response.status_code == 404


class TestIntervalEndpoints:
    def test_presets(self, client) -> None:
        response = client.get("/api/intervals/presets")
        assert [p["label"] for p in response.json()] == ["30s", "1m", "5m", "30m", "1h", "12h", "24h"]

    def test_position(self, client) -> None:
        response = client.get("/api/intervals/position", params={"seconds": 3600})
        data = response.json()
        assert data["position"] == pytest.approx(400 / 6)
        assert data["label"] == "1 hours"

    def test_position_out_of_range(self, client) -> None:
        response = client.get("/api/intervals/position", params={"seconds": 10})
        assert response.status_code == 422

    def test_seconds(self, client) -> None:
        response = client.get("/api/intervals/seconds", params={"position": 0})
        assert response.json()["seconds"] == 30
        response = client.get("/api/intervals/seconds", params={"position": 101})
        assert response.status_code == 422
