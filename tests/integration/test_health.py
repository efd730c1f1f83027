"""
Integration tests for the health endpoint and request middleware.
"""
import uuid

import pytest


@pytest.mark.integration
def test_health_endpoint(client):
    """Test that /health returns 200 with {status: ok}."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.integration
def test_cors_headers_included(client):
    response = client.get("/health", headers={"Origin": "http://localhost:8081"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:8081"


@pytest.mark.integration
def test_correlation_id_generated(client):
    """A correlation ID is generated when the caller sends none."""
    response = client.get("/health")

    correlation_id = response.headers["X-Correlation-ID"]
    try:
        uuid.UUID(correlation_id)
    except ValueError:
        pytest.fail(f"Correlation ID is not a valid UUID: {correlation_id}")


@pytest.mark.integration
def test_correlation_id_preserved_in_errors(client):
    """The caller's correlation ID comes back in headers and error bodies."""
    custom = str(uuid.uuid4())

    response = client.get("/users/me", headers={"X-Correlation-ID": custom})

    assert response.status_code == 401
    assert response.headers["X-Correlation-ID"] == custom
    assert response.json()["correlation_id"] == custom


@pytest.mark.integration
def test_unknown_route(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"
