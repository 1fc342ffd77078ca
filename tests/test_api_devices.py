from __future__ import annotations

import pytest

from app import create_app
from app.security.auth import BRIDGE_KEY_HEADER

BRIDGE_KEY = "bridge-key"


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SIPEKA_SECRET_KEY", "test-secret")
    app = create_app(
        {
            "database_path": str(tmp_path / "test.db"),
            "audit_log_path": str(tmp_path / "logs" / "audit.log"),
            "session_bridge_key": BRIDGE_KEY,
        }
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def _sign_in(client, uid="user-1"):
    response = client.post(
        "/auth/session",
        json={"uid": uid, "displayName": "Sari", "email": "sari@example.com"},
        headers={BRIDGE_KEY_HEADER: BRIDGE_KEY},
    )
    assert response.status_code == 200


def test_session_bridge_round_trip(client, tmp_path):
    assert client.get("/auth/session").status_code == 401
    _sign_in(client)
    assert client.get("/auth/session").get_json()["data"]["uid"] == "user-1"
    assert client.delete("/auth/session").status_code == 200
    assert client.get("/auth/session").status_code == 401

    audit = (tmp_path / "logs" / "audit.log").read_text(encoding="utf-8")
    assert '"action": "login"' in audit
    assert '"action": "logout"' in audit


def test_session_requires_uid(client):
    response = client.post("/auth/session", json={"displayName": "x"}, headers={BRIDGE_KEY_HEADER: BRIDGE_KEY})
    assert response.status_code == 400


@pytest.mark.parametrize("headers", [{}, {BRIDGE_KEY_HEADER: "guess"}])
def test_session_bridge_rejects_unverified_caller(client, headers):
    response = client.post("/auth/session", json={"uid": "victim"}, headers=headers)
    assert response.status_code == 401
    assert client.get("/auth/session").status_code == 401


def test_session_bridge_disabled_without_configured_key(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SIPEKA_SESSION_BRIDGE_KEY", raising=False)
    app = create_app({"database_path": str(tmp_path / "test.db"), "audit_log_path": str(tmp_path / "audit.log")})
    response = app.test_client().post("/auth/session", json={"uid": "u1"}, headers={BRIDGE_KEY_HEADER: ""})
    assert response.status_code == 401


def test_device_crud(client):
    _sign_in(client)
    created = client.post(
        "/api/v1/devices",
        json={"name": "Kolam Nila", "location": "Bogor", "coordinates": {"lat": -6.59, "lng": 106.8}},
    )
    assert created.status_code == 201
    device = created.get_json()["data"]
    assert len(device["id"]) == 10
    assert device["auth_token"] == device["id"]

    listed = client.get("/api/v1/devices").get_json()["data"]
    assert [d["id"] for d in listed] == [device["id"]]

    patched = client.patch(f"/api/v1/devices/{device['id']}", json={"name": "Kolam Mas"})
    assert patched.get_json()["data"]["name"] == "Kolam Mas"

    token = client.post(f"/api/v1/devices/{device['id']}/token").get_json()["data"]
    assert token == {"token": device["id"], "device_id": device["id"]}

    assert client.delete(f"/api/v1/devices/{device['id']}").status_code == 200
    assert client.get(f"/api/v1/devices/{device['id']}").status_code == 404


def test_duplicate_custom_id_is_conflict(client):
    _sign_in(client)
    assert client.post("/api/v1/devices", json={"name": "A", "custom_id": "kolam01"}).status_code == 201
    response = client.post("/api/v1/devices", json={"name": "B", "custom_id": "kolam01"})
    assert response.status_code == 409


def test_foreign_token_cannot_be_claimed(client):
    _sign_in(client, "owner")
    assert client.post("/api/v1/devices", json={"name": "A", "custom_id": "kolam01"}).status_code == 201

    _sign_in(client, "intruder")
    response = client.post("/api/v1/devices", json={"name": "B", "custom_id": "x1", "auth_token": "kolam01"})
    assert response.status_code == 409
    assert client.get("/api/v1/readings/kolam01").status_code == 403


def test_invalid_device_payload(client):
    _sign_in(client)
    response = client.post("/api/v1/devices", json={"name": ""})
    assert response.status_code == 400
    assert response.get_json()["details"]["errors"]


def test_foreign_device_hidden_and_protected(client):
    _sign_in(client, "owner")
    device_id = client.post("/api/v1/devices", json={"name": "A"}).get_json()["data"]["id"]

    _sign_in(client, "intruder")
    assert client.get(f"/api/v1/devices/{device_id}").status_code == 404
    assert client.patch(f"/api/v1/devices/{device_id}", json={"name": "X"}).status_code == 403
    assert client.delete(f"/api/v1/devices/{device_id}").status_code == 403


def test_logs_listing_filters_and_delete(client):
    _sign_in(client)
    device_id = client.post("/api/v1/devices", json={"name": "Kolam Nila"}).get_json()["data"]["id"]
    client.delete(f"/api/v1/devices/{device_id}")

    logs = client.get("/api/v1/logs").get_json()["data"]
    assert [entry["message"] for entry in logs] == ["Device deleted", "Device created"]

    medium = client.get("/api/v1/logs?severity=medium&date_range=today").get_json()["data"]
    assert [entry["message"] for entry in medium] == ["Device deleted"]

    alerts = client.get("/api/v1/logs/alerts").get_json()["data"]
    assert [entry["message"] for entry in alerts] == ["Device deleted"]

    assert client.get("/api/v1/logs?severity=critical").status_code == 400
    assert client.delete(f"/api/v1/logs/{logs[0]['id']}").status_code == 200
    assert client.delete(f"/api/v1/logs/{logs[0]['id']}").status_code == 404


def test_dashboard_overview_and_periods(client):
    assert client.get("/api/v1/dashboard/overview").status_code == 401
    periods = client.get("/api/v1/dashboard/periods").get_json()["data"]
    assert [p["minutes"] for p in periods if p["default"]] == [5]

    _sign_in(client)
    client.post("/api/v1/devices", json={"name": "A"})
    overview = client.get("/api/v1/dashboard/overview").get_json()["data"]
    assert overview["total_devices"] == 1
    assert overview["online_devices"] == 0


def test_unknown_api_route_is_json_404(client):
    response = client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.get_json()["ok"] is False
