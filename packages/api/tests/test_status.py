"""Tests for status, refresh, stats and health endpoints."""

from __future__ import annotations


def test_status_before_refresh(client):
    """GET /v1/status starts idle on demo data."""
    response = client.get("/v1/status")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["state"] == "idle"
    assert data["source_label"] == "Demo"
    assert data["badge"]["text"] == "Source API: Demo Mode"
    assert data["loading"] is False
    assert data["last_refresh"] is None
    assert [s["source_label"] for s in data["sources"]] == ["PrimaryAPI", "SecondaryAPI"]


def test_refresh_falls_back_to_secondary(client):
    """POST /v1/refresh runs the chain and reports the winning source."""
    response = client.post("/v1/refresh")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ignored"] is False
    assert data["state"] == "succeeded"
    assert data["source_label"] == "SecondaryAPI"
    assert data["badge"]["color"] == "#3b82f6"
    assert [a["ok"] for a in data["attempts"]] == [False, True]
    assert data["replaced"] == ["quarterly_revenue"]

    status = client.get("/v1/status").json()["data"]
    assert status["state"] == "succeeded"
    assert status["last_refresh"]["source_label"] == "SecondaryAPI"


def test_refresh_exhausted_reports_notice(offline_client):
    response = offline_client.post("/v1/refresh")

    data = response.json()["data"]
    assert data["state"] == "exhausted"
    assert data["source_label"] == "Demo"
    assert data["notice"] == "Using demo Australian business data."


def test_stats_default(client):
    """GET /v1/stats returns the four stat cards."""
    response = client.get("/v1/stats")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_revenue"]["display"] == "$1675M"
    assert data["growth_rate"]["display"] == "+34.5%"


def test_stats_follow_refresh(client):
    client.post("/v1/refresh")
    data = client.get("/v1/stats").json()["data"]
    assert data["growth_rate"]["display"] == "+20.0%"


def test_health(client):
    """GET /health returns ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["version"] == "0.1.0"


def test_ready(client):
    """GET /ready returns ready with the reconciliation state."""
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    assert response.json()["reconciliation"] == "idle"


def test_request_id_header(client):
    response = client.get("/health", headers={"x-request-id": "abc123"})
    assert response.headers.get("x-request-id") == "abc123"
