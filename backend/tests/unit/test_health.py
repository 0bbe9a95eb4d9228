from __future__ import annotations


def test_health_returns_status_and_services(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "version" in data
    assert "talenox" in data["services"]
    assert "email" in data["services"]
    assert data["workflows_in_flight"] == 0


def test_health_not_configured_is_degraded(client):
    response = client.get("/api/v1/health")
    data = response.json()
    assert data["status"] == "degraded"
    assert data["services"]["talenox"] == "not_configured"
    assert data["services"]["email"] == "not_configured"


def test_health_configured_is_healthy(configured_client):
    data = configured_client.get("/api/v1/health").json()
    assert data["status"] == "healthy"
    assert data["services"]["talenox"] == "configured"


def test_readiness_probe(client):
    response = client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["ready"] is True
