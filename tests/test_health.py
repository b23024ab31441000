"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from foodgraph.main import app


def test_health_check() -> None:
    """Test basic health check endpoint."""
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "foodgraph-api"}


def test_root_endpoint() -> None:
    """Test root endpoint returns API info."""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "Foodgraph API"
    assert "version" in data
    assert data["docs"] == "/docs"


def test_request_id_is_echoed() -> None:
    client = TestClient(app)
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated() -> None:
    client = TestClient(app)
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
