"""Liveness and readiness probes."""

import pytest

pytestmark = pytest.mark.integration


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready_with_migrated_schema(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["checks"]["schema"]["status"] == "current"


def test_not_ready_without_migrations(unmigrated_client):
    response = unmigrated_client.get("/health/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "not_ready"
    assert body["checks"]["database"]["status"] == "healthy"
    assert body["checks"]["schema"]["status"] == "pending_migrations"
